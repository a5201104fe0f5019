"""Turn co-change counts into ranked coupling records."""

from typing import List, Union

from ..exceptions import InvalidConfigError
from .models import CouplingRecord, CouplingStats, Normalization


def generate_report(
    stats: CouplingStats,
    threshold: float,
    top_n: int = 1,
    normalization: Union[Normalization, str] = Normalization.COUPLED,
) -> List[CouplingRecord]:
    """Top coupled files per changed file with confidence >= *threshold*.

    Confidence is shared commits divided by the coupled file's commit count
    (``COUPLED``) or by the changed file's (``CHANGED``). Either way the
    denominator counts every commit containing the pair, so confidence
    stays in [0, 1].

    Candidates are ranked by confidence, then shared commits; remaining
    ties keep first-seen order, so identical history gives identical
    reports. Changed files with no candidate above threshold are omitted.
    """
    if not 0.0 <= threshold <= 1.0:
        raise InvalidConfigError("threshold", threshold, "must be between 0.0 and 1.0")
    if top_n < 1:
        raise InvalidConfigError("top_n", top_n, "must be a positive integer")
    mode = Normalization(normalization)

    records: List[CouplingRecord] = []
    for path, coupled in stats.cooccurrence.items():
        candidates: List[CouplingRecord] = []
        for coupled_path, shared in coupled.items():
            if mode is Normalization.COUPLED:
                total = stats.commit_count.get(coupled_path, 0)
            else:
                total = stats.commit_count.get(path, 0)
            if total <= 0:
                continue
            confidence = shared / total
            if confidence < threshold:
                continue
            candidates.append(
                CouplingRecord(
                    path=path,
                    coupled_path=coupled_path,
                    shared_commits=shared,
                    total_commits=total,
                    confidence=confidence,
                )
            )

        candidates.sort(key=lambda r: (-r.confidence, -r.shared_commits))
        records.extend(candidates[:top_n])

    return records
