"""Merge engine: fold source companies into a target company.

Per source, in order: record its slug and aliases on the target, repoint its
residencies, delete it. The target keeps its name and slug. Sources that no
longer exist are skipped, so replaying a merge request is a no-op.

The whole merge is one transaction. Merges are serialized within the process;
run a single worker for admin traffic or serialize merges upstream.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from residency_board.services import repository

logger = logging.getLogger(__name__)

_merge_lock = threading.Lock()


class CompanyNotFoundError(LookupError):
    """Raised when the merge target does not exist. Nothing is mutated."""

    pass


class MergeInProgressError(RuntimeError):
    """Raised when another merge is already running."""

    pass


@dataclass
class MergeResult:
    target_id: int
    merged_ids: list[int] = field(default_factory=list)
    skipped_ids: list[int] = field(default_factory=list)
    aliases: list[str] = field(default_factory=list)


def merge_companies(db: Session, target_id: int, source_ids: list[int]) -> MergeResult:
    """Merge source companies into target.

    Raises ValueError when source_ids is empty, CompanyNotFoundError when the
    target is missing, MergeInProgressError when another merge holds the lock.
    """
    if not source_ids:
        raise ValueError("At least one source company is required")

    if not _merge_lock.acquire(blocking=False):
        raise MergeInProgressError("Another merge is in progress")
    try:
        return _merge(db, target_id, source_ids)
    finally:
        _merge_lock.release()


def _merge(db: Session, target_id: int, source_ids: list[int]) -> MergeResult:
    target = repository.get_company(db, target_id)
    if target is None:
        raise CompanyNotFoundError(f"Target company {target_id} not found")

    result = MergeResult(target_id=target.id)
    aliases: list[str] = list(target.alias_slugs)

    try:
        for source_id in source_ids:
            if source_id == target.id:
                result.skipped_ids.append(source_id)
                continue
            source = repository.get_company(db, source_id)
            if source is None:
                logger.info("Merge source %s already gone; skipping", source_id)
                result.skipped_ids.append(source_id)
                continue

            for slug in [source.slug, *source.alias_slugs]:
                if slug not in aliases:
                    aliases.append(slug)
            # Record aliases before the source disappears so its slug stays resolvable
            repository.set_company_aliases(db, target, aliases)

            residencies = repository.list_residencies_by_company(db, source.id)
            for residency in residencies:
                repository.patch_residency(db, residency, {"company_id": target.id})

            repository.delete_company(db, source)
            result.merged_ids.append(source_id)
            logger.info(
                "Merged company %s (%s) into %s: %d residencies repointed",
                source_id,
                source.slug,
                target.id,
                len(residencies),
            )

        result.aliases = repository.set_company_aliases(db, target, aliases)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return result
