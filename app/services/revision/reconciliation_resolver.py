"""Applies human decisions to the escalated matches of a revision."""

from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import ConflictError, DocumentNotFoundError, ValidationError
from app.database.models import Element, RevisionMatch, Script
from app.models.enums import ElementStatus, RevisionDecision, ScriptStatus
from app.repositories.element_repository import ElementRepository
from app.repositories.revision_match_repository import RevisionMatchRepository
from app.repositories.script_repository import ScriptRepository
from app.schemas.revision import RevisionDecisionItem, RevisionMatchRead
from app.services.base_service import BaseService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

VALID_DECISIONS = frozenset(decision.value for decision in RevisionDecision)

# Decisions that act on the parent's element and therefore need it to exist
_OLD_ELEMENT_DECISIONS = frozenset(
    {RevisionDecision.MAP.value, RevisionDecision.KEEP.value, RevisionDecision.ARCHIVE.value}
)


class ReconciliationResolver(BaseService):
    """Resolves a RECONCILING script's revision matches in one batch.

    The whole batch is validated before anything is written; a single bad
    match id or decision rejects every decision. Element updates, match
    updates and the move to READY share one transaction.
    """

    def __init__(self, session_maker: Optional[async_sessionmaker[AsyncSession]] = None):
        super().__init__(session_maker)

    async def resolve_revision(
        self,
        script_id: UUID,
        decisions: Sequence[RevisionDecisionItem],
    ) -> None:
        """Apply ``decisions`` and move the script to READY.

        Raises:
            DocumentNotFoundError: If the script does not exist
            ConflictError: If the script is not RECONCILING
            ValidationError: If any decision or match id is invalid;
                ``invalid_ids`` names every offending match id
        """
        await self.execute(script_id, decisions)

    async def list_revision_matches(self, script_id: UUID) -> List[RevisionMatchRead]:
        """Return the script's revision matches in creation order."""
        async with self.session_maker() as session:
            script = await ScriptRepository(session).get_by_id(script_id)
            self._require_reconciling(script, script_id)
            matches = await RevisionMatchRepository(session).get_by_script(script_id)
            return [RevisionMatchRead.model_validate(match) for match in matches]

    async def check_decisions(
        self,
        script_id: UUID,
        decisions: Sequence[RevisionDecisionItem],
    ) -> None:
        """Run the read-only preconditions without mutating anything."""
        self.validate(script_id, decisions)
        async with self.session_maker() as session:
            await self._load_and_check(session, script_id, decisions)

    def validate(self, script_id: UUID, decisions: Sequence[RevisionDecisionItem]):
        if not decisions:
            raise ValidationError("At least one decision is required")

        invalid = [d.match_id for d in decisions if d.decision not in VALID_DECISIONS]
        if invalid:
            raise ValidationError(
                f"Invalid decision. Must be one of: {', '.join(sorted(VALID_DECISIONS))}",
                invalid_ids=invalid,
            )

        seen = set()
        duplicates = []
        for d in decisions:
            if d.match_id in seen:
                duplicates.append(d.match_id)
            seen.add(d.match_id)
        if duplicates:
            raise ValidationError("Each match may be decided only once", invalid_ids=duplicates)

    async def run(self, script_id: UUID, decisions: Sequence[RevisionDecisionItem]) -> None:
        async with self.session_maker() as session:
            async with session.begin():
                script, matches, elements = await self._load_and_check(
                    session, script_id, decisions
                )

                element_repo = ElementRepository(session)
                match_repo = RevisionMatchRepository(session)

                for item in decisions:
                    match = matches[item.match_id]
                    old_element = elements.get(match.old_element_id)
                    await self._apply_decision(element_repo, script_id, item, match, old_element)
                    await match_repo.update_instance(
                        match, user_decision=item.decision, resolved=True
                    )

                await ScriptRepository(session).update_status(script, ScriptStatus.READY)

        LOGGER.info(
            "Revision resolved",
            extra={"script_id": str(script_id), "decisions": len(decisions)},
        )

    async def _load_and_check(
        self,
        session: AsyncSession,
        script_id: UUID,
        decisions: Sequence[RevisionDecisionItem],
    ) -> Tuple[Script, Dict[UUID, RevisionMatch], Dict[UUID, Element]]:
        script = await ScriptRepository(session).get_by_id(script_id)
        self._require_reconciling(script, script_id)

        match_ids = [d.match_id for d in decisions]
        found = await RevisionMatchRepository(session).get_unresolved_by_ids(script_id, match_ids)
        matches = {match.id: match for match in found}

        unknown = [match_id for match_id in match_ids if match_id not in matches]
        if unknown:
            raise ValidationError(
                "Unknown or already resolved revision matches", invalid_ids=unknown
            )

        element_repo = ElementRepository(session)
        elements: Dict[UUID, Element] = {}
        orphaned = []
        for item in decisions:
            match = matches[item.match_id]
            if item.decision not in _OLD_ELEMENT_DECISIONS:
                continue
            element = (
                await element_repo.get_by_id(match.old_element_id)
                if match.old_element_id is not None
                else None
            )
            if element is None:
                orphaned.append(item.match_id)
            else:
                elements[element.id] = element
        if orphaned:
            raise ValidationError(
                "Revision matches reference an element that no longer exists",
                invalid_ids=orphaned,
            )

        return script, matches, elements

    @staticmethod
    def _require_reconciling(script: Optional[Script], script_id: UUID) -> None:
        if script is None:
            raise DocumentNotFoundError(f"Script {script_id} not found")
        if script.status != ScriptStatus.RECONCILING.value:
            raise ConflictError(
                f"Script {script_id} is {script.status}, expected RECONCILING"
            )

    async def _apply_decision(
        self,
        element_repo: ElementRepository,
        script_id: UUID,
        item: RevisionDecisionItem,
        match: RevisionMatch,
        old_element: Optional[Element],
    ) -> None:
        department = {"department_id": item.department_id} if item.department_id else {}
        decision = RevisionDecision(item.decision)

        if decision == RevisionDecision.MAP:
            await element_repo.update_instance(
                old_element,
                script_id=script_id,
                name=match.detected_name,
                highlight_page=match.detected_page,
                highlight_text=match.detected_highlight_text,
                **department,
            )
        elif decision == RevisionDecision.CREATE_NEW:
            await element_repo.create_element(
                script_id=script_id,
                name=match.detected_name,
                type=match.detected_type,
                highlight_page=match.detected_page,
                highlight_text=match.detected_highlight_text,
                department_id=item.department_id,
            )
        elif decision == RevisionDecision.KEEP:
            await element_repo.update_instance(old_element, script_id=script_id, **department)
        else:
            await element_repo.update_instance(old_element, status=ElementStatus.ARCHIVED.value)
