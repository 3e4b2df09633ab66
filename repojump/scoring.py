"""Frecency scoring — usage scores that combine frequency and recency.

Each access decays the previous score by the time elapsed since the last
access and adds a fixed increment::

    score' = decay(now - last_accessed) * score + INCREMENT

``decay`` is hyperbolic, ``HALF_LIFE / (HALF_LIFE + elapsed)``: a score left
alone for ``HALF_LIFE`` seconds counts half as much on the next access.
Only integer subtraction, float addition and division are involved, so the
result is bit-identical on every IEEE-754 platform.
"""

from __future__ import annotations

from repojump.registry.models import Registry, RepoRecord

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY

INCREMENT = 1.0
HALF_LIFE = WEEK
MAX_SCORE = 10_000.0
RESCALE_FACTOR = 0.5


def decay(elapsed: int) -> float:
    """Weight kept by a score after ``elapsed`` seconds (1.0 down towards 0)."""
    if elapsed <= 0:
        return 1.0
    return HALF_LIFE / (HALF_LIFE + elapsed)


def next_score(score: float, last_accessed: int, now: int) -> float:
    """Pure score update for one access at ``now``."""
    return decay(now - last_accessed) * score + INCREMENT


def record_access(registry: Registry, record: RepoRecord, now: int) -> RepoRecord:
    """Register one visit to ``record`` and keep every score under ``MAX_SCORE``."""
    record.score = next_score(record.score, record.last_accessed, now)
    record.accessed += 1
    # The clock may step back; the recorded access time never does.
    record.last_accessed = max(record.last_accessed, now)

    if record.score > MAX_SCORE:
        normalize(registry)
    return record


def normalize(registry: Registry) -> int:
    """Rescale all scores by the same factor until none exceeds ``MAX_SCORE``.

    Returns the number of rescaling rounds applied.
    """
    rounds = 0
    while any(r.score > MAX_SCORE for r in registry.records.values()):
        for record in registry.records.values():
            record.score *= RESCALE_FACTOR
        rounds += 1
    return rounds
