"""Pytest configuration and shared fixtures."""

from typing import Optional
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.database.models  # noqa: F401
from app.core.database import Base
from app.database.models import Department, Element, RevisionMatch, Script
from app.models.enums import ElementSource, ElementStatus, ScriptStatus
from app.models.screenplay import PageText


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def production_id() -> UUID:
    return uuid4()


@pytest.fixture
def create_script(session_maker, production_id):
    """Factory inserting a Script row."""

    async def _create(
        status: ScriptStatus = ScriptStatus.PROCESSING,
        parent_script_id: Optional[UUID] = None,
        storage_key: str = "productions/scripts/draft.fdx",
        scene_data: Optional[list] = None,
    ) -> Script:
        async with session_maker() as session:
            async with session.begin():
                script = Script(
                    production_id=production_id,
                    parent_script_id=parent_script_id,
                    storage_key=storage_key,
                    status=status.value,
                    scene_data=scene_data,
                )
                session.add(script)
        return script

    return _create


@pytest.fixture
def create_element(session_maker):
    """Factory inserting an Element row."""

    async def _create(
        script_id: UUID,
        name: str,
        type: str = "CHARACTER",
        status: ElementStatus = ElementStatus.ACTIVE,
        source: ElementSource = ElementSource.AUTO,
        highlight_page: Optional[int] = 1,
        highlight_text: Optional[str] = None,
    ) -> Element:
        async with session_maker() as session:
            async with session.begin():
                element = Element(
                    script_id=script_id,
                    name=name,
                    type=type,
                    status=status.value,
                    source=source.value,
                    highlight_page=highlight_page,
                    highlight_text=highlight_text if highlight_text is not None else name,
                )
                session.add(element)
        return element

    return _create


@pytest.fixture
def create_department(session_maker, production_id):
    """Factory inserting a Department row."""

    async def _create(name: str) -> Department:
        async with session_maker() as session:
            async with session.begin():
                department = Department(production_id=production_id, name=name)
                session.add(department)
        return department

    return _create


@pytest.fixture
def create_revision_match(session_maker):
    """Factory inserting a RevisionMatch row."""

    async def _create(new_script_id: UUID, **values) -> RevisionMatch:
        values.setdefault("detected_type", "CHARACTER")
        values.setdefault("resolved", False)
        async with session_maker() as session:
            async with session.begin():
                match = RevisionMatch(new_script_id=new_script_id, **values)
                session.add(match)
        return match

    return _create


@pytest.fixture
def mock_storage():
    """Storage collaborator returning bytes set on ``download_file.return_value``."""
    storage = AsyncMock()
    storage.download_file = AsyncMock(return_value=b"")
    return storage


@pytest.fixture
def make_fdx():
    """Build a minimal FinalDraft document from (type, text) paragraphs."""

    def _make(paragraphs, tags=None) -> bytes:
        body = []
        for item in paragraphs:
            para_type, text = item[0], item[1]
            new_page = ' StartsNewPage="Yes"' if len(item) > 2 and item[2] else ""
            body.append(f'<Paragraph Type="{para_type}"{new_page}><Text>{text}</Text></Paragraph>')

        tag_xml = ""
        if tags:
            categories = []
            for category, names in tags.items():
                inner = "".join(f'<Tag Name="{name}"/>' for name in names)
                categories.append(f'<TagCategory Name="{category}">{inner}</TagCategory>')
            tag_xml = f"<TagData>{''.join(categories)}</TagData>"

        return (
            '<?xml version="1.0" encoding="UTF-8" standalone="no" ?>'
            '<FinalDraft DocumentType="Script" Template="No" Version="5">'
            f"<Content>{''.join(body)}</Content>{tag_xml}</FinalDraft>"
        ).encode("utf-8")

    return _make


@pytest.fixture
def make_pages():
    """Build PageText objects from raw page strings, numbered from 1."""

    def _make(*texts: str):
        return [PageText(page_number=i, text=text) for i, text in enumerate(texts, start=1)]

    return _make
