"""Implied wardrobe and hair & makeup elements derived from scene data."""

from typing import Iterable, List, Optional
from uuid import UUID

from app.constants.departments import COSTUME, HAIR_AND_MAKEUP
from app.core.exceptions import DocumentNotFoundError, ValidationError
from app.models.enums import ElementType
from app.models.screenplay import SceneInfo
from app.repositories.department_repository import DepartmentRepository
from app.repositories.element_repository import ElementRepository
from app.repositories.script_repository import ScriptRepository
from app.services.base_service import BaseService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

PER_SCENE = "per-scene"
PER_CHARACTER = "per-character"
IMPLIED_MODES = (PER_SCENE, PER_CHARACTER)


def build_implied_elements(scenes: Iterable[SceneInfo], mode: str) -> List[tuple[str, str]]:
    """Build ``(name, department)`` pairs for every implied element.

    Args:
        scenes: Scene table of a script
        mode: ``per-scene`` for one pair per character per scene,
            ``per-character`` for one pair per distinct character

    Raises:
        ValidationError: If ``mode`` is not recognised
    """
    if mode not in IMPLIED_MODES:
        raise ValidationError(f"Invalid mode {mode!r}. Must be one of: {', '.join(IMPLIED_MODES)}")

    implied: List[tuple[str, str]] = []
    if mode == PER_SCENE:
        for scene in scenes:
            for character in scene.characters:
                implied.append((f"{character} - Wardrobe (Scene {scene.scene_number})", COSTUME))
                implied.append(
                    (f"{character} - Hair & Makeup (Scene {scene.scene_number})", HAIR_AND_MAKEUP)
                )
        return implied

    # dict keeps first-seen order
    characters = dict.fromkeys(c for scene in scenes for c in scene.characters)
    for character in characters:
        implied.append((f"{character} - Wardrobe", COSTUME))
        implied.append((f"{character} - Hair & Makeup", HAIR_AND_MAKEUP))
    return implied


def scenes_from_data(scene_data: Optional[list]) -> List[SceneInfo]:
    """Rebuild SceneInfo objects from a script's stored ``scene_data``."""
    return [
        SceneInfo(
            scene_number=item["scene_number"],
            location=item["location"],
            characters=list(item.get("characters", [])),
        )
        for item in scene_data or []
    ]


class ImpliedElementService(BaseService):
    """Persists implied elements for a processed script."""

    async def generate(self, script_id: UUID, production_id: UUID, mode: str) -> int:
        """Create the implied elements that do not exist yet.

        Returns:
            Number of elements created
        """
        return await self.execute(script_id, production_id, mode)

    def validate(self, script_id: UUID, production_id: UUID, mode: str):
        if mode not in IMPLIED_MODES:
            raise ValidationError(
                f"Invalid mode {mode!r}. Must be one of: {', '.join(IMPLIED_MODES)}"
            )

    async def run(self, script_id: UUID, production_id: UUID, mode: str) -> int:
        async with self.session_maker() as session:
            async with session.begin():
                script = await ScriptRepository(session).get_by_id(script_id)
                if script is None:
                    raise DocumentNotFoundError(f"Script {script_id} not found")

                implied = build_implied_elements(scenes_from_data(script.scene_data), mode)

                departments = await DepartmentRepository(session).get_name_map(production_id)
                element_repo = ElementRepository(session)
                existing_names = await element_repo.get_active_names(script_id)

                created = 0
                for name, department in implied:
                    if name in existing_names:
                        continue
                    await element_repo.create_element(
                        script_id=script_id,
                        name=name,
                        type=ElementType.OTHER,
                        department_id=departments.get(department),
                    )
                    existing_names.add(name)
                    created += 1

        LOGGER.info(
            "Generated implied elements",
            extra={"script_id": str(script_id), "mode": mode, "created": created},
        )
        return created
