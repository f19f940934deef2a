"""Pluggable word segmentation backends.

The converter only needs two things from a segmenter: cut text into an
ordered sequence of substrings covering it, and accept extra vocabulary so
that long dictionary keys are never split.

Backends:
    - jieba: private HanTokenizer instance, HMM enabled

Usage:
    from ztarcc.segment import create_segmenter
    segmenter = create_segmenter("jieba")
    segmenter.add_word("數據庫")
    tokens = list(segmenter.cut("数据库很大"))
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator
import re

import jieba


class Segmenter(ABC):
    """Base class for segmentation backends."""

    name: str = "base"

    @abstractmethod
    def cut(self, text: str) -> Iterable[str]:
        """Split text into substrings whose concatenation is `text`."""
        pass

    @abstractmethod
    def add_word(self, word: str) -> None:
        """Add a word the segmenter must keep intact."""
        pass

    def add_words(self, words: Iterable[str]) -> int:
        """Add many words. Returns how many were added."""
        count = 0
        for word in words:
            self.add_word(word)
            count += 1
        return count


# Han blocks as jieba-rs matches them: CJK Unified Ideographs with Extension A
# through F, compatibility ideographs, plus jieba's ASCII word characters.
RE_HAN = re.compile(
    r"([\u3400-\u4DBF\u4E00-\u9FFF\uF900-\uFAFF\U00020000-\U0002FA1F"
    r"a-zA-Z0-9+#&\._%\-]+)"
)
RE_SKIP = re.compile(r"(\r\n|\s)")


class HanTokenizer(jieba.Tokenizer):
    """jieba.Tokenizer whose block splitting covers every CJK ideograph range.

    Stock jieba only treats U+4E00-U+9FD5 as Han, so added words holding
    Extension A or B characters would be cut apart before the DAG sees them.
    """

    def cut(self, sentence, cut_all=False, HMM=True, use_paddle=False) -> Iterator[str]:
        if cut_all:
            yield from super().cut(sentence, cut_all=True, HMM=HMM)
            return
        sentence = jieba.strdecode(sentence)
        cut_block = self._Tokenizer__cut_DAG if HMM else self._Tokenizer__cut_DAG_NO_HMM
        for block in RE_HAN.split(sentence):
            if not block:
                continue
            if RE_HAN.match(block):
                yield from cut_block(block)
                continue
            for part in RE_SKIP.split(block):
                if RE_SKIP.match(part):
                    yield part
                else:
                    yield from part


class JiebaSegmenter(Segmenter):
    """jieba-based segmenter.

    Each instance owns its own HanTokenizer, so added vocabulary never
    leaks into the global jieba dictionary or into other converters.
    """

    name = "jieba"

    def __init__(self, hmm: bool = True):
        self.hmm = hmm
        self._tokenizer = HanTokenizer()

    def cut(self, text: str) -> Iterable[str]:
        return self._tokenizer.cut(text, HMM=self.hmm)

    def add_word(self, word: str) -> None:
        self._tokenizer.add_word(word)


# =============================================================================
# Registry Functions
# =============================================================================

_SEGMENTERS: dict[str, type[Segmenter]] = {
    "jieba": JiebaSegmenter,
}


def create_segmenter(name: str) -> Segmenter:
    """Create a fresh segmenter instance by name.

    Instances are not cached: each converter augments its own vocabulary.
    """
    if name not in _SEGMENTERS:
        raise ValueError(
            f"Unknown segmenter: {name}. "
            f"Available: {list(_SEGMENTERS.keys())}"
        )
    return _SEGMENTERS[name]()


def register_segmenter(name: str, cls: type[Segmenter]) -> None:
    """Register a custom segmenter class."""
    _SEGMENTERS[name] = cls


def list_segmenters() -> list[str]:
    """List available segmenter names."""
    return list(_SEGMENTERS.keys())
