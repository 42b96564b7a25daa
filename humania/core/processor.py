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
FST matcher base.

A Processor owns a character level tagger that rewrites an input it fully
accepts into the token format ``name { SLOT: "literal" ... }``, and the
input projection of that tagger used for plain acceptance tests.
"""

import re
from typing import Any, Dict, List, Optional

from pynini import Fst, escape, shortestpath
from pynini.lib.pynutil import insert


class Processor:
    """
    Character level FST processor.

    Attributes:
        name (str): token name written around the tagger output
        tagger (Optional[Fst]): transducer from input text to tagged text
        acceptor (Optional[Fst]): input projection of the tagger
    """

    TOKEN_PATTERN = re.compile(r"(\w+)\s*\{(.*)\}", re.DOTALL)
    KV_PATTERN = re.compile(r'(\w+)\s*:\s*(?:"([^"]*)"|(\S+))')

    def __init__(self, name: str) -> None:
        self.name = name
        self.tagger: Optional[Fst] = None
        self.acceptor: Optional[Fst] = None

    def add_tokens(self, tagger: Fst) -> Fst:
        """
        Wrap tagger output as ``name { ... }``.

        Args:
            tagger: transducer emitting ``SLOT: "literal" `` fragments
        """
        tagger = insert(f"{self.name} {{ ") + tagger + insert("}")
        return tagger.optimize()

    def build_acceptor(self) -> Fst:
        """Project the tagger onto its input side and minimize it."""
        if self.tagger is None:
            raise ValueError(f"tagger {self.name} has not been built")
        self.acceptor = self.tagger.copy().project("input").rmepsilon().optimize()
        return self.acceptor

    @staticmethod
    def is_compilable(text: str) -> bool:
        """
        Whether text can be compiled into a pynini string.

        pynini takes UTF-8 C strings: lone surrogates do not encode and a NUL
        would silently end the string.
        """
        if "\x00" in text:
            return False
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            return False
        return True

    def accepts(self, text: str) -> bool:
        """True when the whole of text is accepted, anchored at both ends."""
        if not self.is_compilable(text):
            return False
        if self.acceptor is None:
            self.build_acceptor()
        lattice = escape(text) @ self.acceptor
        return lattice.num_states() > 0

    def tag(self, text: str) -> Optional[Dict[str, str]]:
        """
        Tag text and return its captured slots.

        Returns:
            None when the tagger does not accept text, otherwise a mapping
            from slot name to the literal it captured.
        """
        if self.tagger is None:
            raise ValueError(f"tagger {self.name} has not been built")
        if not self.is_compilable(text):
            return None
        lattice = escape(text) @ self.tagger
        if lattice.num_states() == 0:
            return None
        tagged_text = shortestpath(lattice, nshortest=1).string()
        tokens = self.parse_tags(tagged_text)
        if not tokens:
            return None
        slots = dict(tokens[0])
        slots.pop("type", None)
        return slots

    @classmethod
    def parse_tags(cls, tagged_text: str) -> List[Dict[str, Any]]:
        """
        Parse tagged text into token dictionaries.

        Example:
            input:  'variant_weekday { VARIANT: "next" WEEKDAY: "friday" }'
            output: [{'type': 'variant_weekday', 'VARIANT': 'next', 'WEEKDAY': 'friday'}]

        Quoted values are kept verbatim, captured literals may contain spaces.
        """
        tokens = []
        for token_type, content in cls.TOKEN_PATTERN.findall(tagged_text):
            token_data = {"type": token_type}
            for match in cls.KV_PATTERN.finditer(content):
                key = match.group(1)
                value = match.group(2) if match.group(2) is not None else match.group(3)
                token_data[key] = value
            tokens.append(token_data)
        return tokens
