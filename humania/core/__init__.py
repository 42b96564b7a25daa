# Copyright (c) 2025 Ming Yu (yuming@oppo.com)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Grammar compilation and resolution core.

Main components:
- TokenRegistry: locale scoped tokens, nested patterns and conversion tables
- PatternCompiler: rule templates to pynini FSTs, combined acceptor
- MatchDispatcher: priority ordered rule dispatch
- date_arithmetic: pure datetime primitives used by the handlers
"""

from .errors import AmbiguousRangeError, CompileError, NoMatch, Unimplemented, ValidationFailure
from .processor import Processor
