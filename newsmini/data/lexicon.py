"""Curated word lists: stopwords, news-friendly keywords and the deny-list."""

from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Optional

from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


DEFAULT_STOPWORDS: FrozenSet[str] = frozenset(
    """
    ABOUT ABOVE AFTER AGAIN AGAINST ALL ALSO AMONG AND ANOTHER ANY ARE AROUND
    BECAUSE BEEN BEFORE BEING BELOW BETWEEN BOTH BUT CAN COULD DID DOES DOING
    DONT DURING EACH EVEN EVERY FEW FOR FROM FURTHER GET GETS GOT HAD HAS HAVE
    HAVING HER HERE HERS HERSELF HIM HIMSELF HIS HOW INTO ITS ITSELF JUST LIKE
    MADE MAKE MANY MORE MOST MUCH MUST NOR NOT NOW OFF ONCE ONLY OTHER OUR OURS
    OUT OVER OWN SAID SAME SAYS SHE SHOULD SINCE SOME STILL SUCH THAN THAT THE
    THEIR THEIRS THEM THEN THERE THESE THEY THIS THOSE THROUGH TOO UNDER UNTIL
    UPON VERY WAS WERE WHAT WHEN WHERE WHICH WHILE WHO WHOM WHY WILL WITH WITHIN
    WITHOUT WOULD YET YOU YOUR YOURS
    """.split()
)

NEWS_KEYWORDS: FrozenSet[str] = frozenset(
    """
    ARTS BOARD BUDGET CITY COUNCIL COUNTY COURT CROP ELECTION FARM FESTIVAL
    FIRE HEALTH HOSPITAL JOBS LIBRARY MAYOR MUSEUM MUSIC NEWS PARK POLICE
    RADIO RAIN RIVER ROAD SCHOOL SENATE SNOW STATE STORM STUDENT TAX TEACHER
    TOWN TRAIN TRIAD VOTE VOTERS WATER WEATHER
    """.split()
)

DENY_LIST: FrozenSet[str] = frozenset(
    """
    NORTH SOUTH EAST WEST NEAR THE AND ANY ONE TWO NEW OLD
    """.split()
)


def load_stopwords(path: Optional[Path | str] = None) -> FrozenSet[str]:
    """Read one stopword per line; fall back to the built-in set."""

    if path is None:
        return DEFAULT_STOPWORDS
    source = Path(path)
    try:
        content = source.read_text(encoding="utf-8")
    except OSError as exc:
        LOGGER.warning("Could not load stopwords from %s (%s); using built-in set", source, exc)
        return DEFAULT_STOPWORDS
    words = frozenset(line.strip().upper() for line in content.splitlines() if line.strip())
    LOGGER.debug("Loaded %d stopwords from %s", len(words), source)
    return words
