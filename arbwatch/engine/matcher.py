"""
Matches prediction market listings across venues.
A question only becomes an arbitrage candidate once it is found on both a
centralized and a decentralized venue.
"""

import re
from difflib import SequenceMatcher
from typing import Iterable, List

from arbwatch.models import MarketQuote, MatchedMarket
from arbwatch.logger import get_logger


logger = get_logger("market_matcher")


class QuestionMatcher:
    """
    Pairs centralized and decentralized quotes for the same question.

    Questions are compared after normalization (case, punctuation and
    whitespace). With min_similarity below 1.0, near-identical wordings
    are also paired using a fuzzy ratio.
    """

    def __init__(self, min_similarity: float = 1.0):
        self.min_similarity = min_similarity

    @staticmethod
    def normalize(question: str) -> str:
        text = question.lower()
        text = re.sub(r"[^\w\s$%.]", " ", text)
        text = re.sub(r"(?<!\d)\.|\.(?!\d)", " ", text)
        return re.sub(r"\s+", " ", text).strip()

    def similarity(self, a: str, b: str) -> float:
        na, nb = self.normalize(a), self.normalize(b)
        if na == nb:
            return 1.0
        return SequenceMatcher(None, na, nb).ratio()

    def match(
        self,
        centralized: Iterable[MarketQuote],
        decentralized: Iterable[MarketQuote],
    ) -> List[MatchedMarket]:
        """Return every centralized x decentralized pair on the same question."""
        decentralized = list(decentralized)
        matched = []

        for c_quote in centralized:
            for d_quote in decentralized:
                if self.similarity(c_quote.question, d_quote.question) < self.min_similarity:
                    continue
                matched.append(MatchedMarket(
                    match_id=f"{c_quote.platform}-{d_quote.platform}-{c_quote.question}",
                    question=c_quote.question,
                    centralized=c_quote,
                    decentralized=d_quote,
                ))

        logger.debug("Markets matched", pairs=len(matched))
        return matched
