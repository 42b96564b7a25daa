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

import logging

from humania.core import logger as humania_logger


def test_library_logs_under_its_own_namespace():
    log = humania_logger.get_logger("humania.core.dispatcher")
    assert log.name == "humania.core.dispatcher"
    root = logging.getLogger(humania_logger.ROOT_NAME)
    assert root.propagate is False
    assert root.handlers


def test_set_module_log_level():
    humania_logger.set_module_log_level("humania.core.pattern_compiler", "debug")
    assert logging.getLogger("humania.core.pattern_compiler").level == logging.DEBUG
    humania_logger.set_module_log_level("humania.core.pattern_compiler", "bogus")
    assert logging.getLogger("humania.core.pattern_compiler").level == logging.WARNING
