"""Shared fixtures."""

from typing import Any

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from skill_handlers import HELLO_MODEL, RecordingSkill, hello_skill

from skill_simulator.models.interaction_model import InteractionModel
from skill_simulator.services.interactor import SkillInteractor
from skill_simulator.services.invokers import local_invoker

APPLICATION_ID = "amzn1.ask.skill.test-app"


@pytest.fixture
def model() -> InteractionModel:
    return InteractionModel.from_dict(HELLO_MODEL)


@pytest.fixture
def skill() -> RecordingSkill:
    return RecordingSkill()


@pytest.fixture
def interactor(model: InteractionModel, skill: RecordingSkill) -> SkillInteractor:
    return SkillInteractor(local_invoker(skill), model, application_id=APPLICATION_ID)


@pytest.fixture
def skill_app() -> FastAPI:
    """Skill served over HTTP, for exercising the remote invoker."""
    app = FastAPI()

    @app.post("/alexa")
    async def alexa_webhook(request: Request) -> dict[str, Any]:
        return hello_skill(await request.json())

    @app.post("/broken")
    async def broken() -> dict[str, Any]:
        raise HTTPException(status_code=500, detail="skill crashed")

    @app.post("/not-json")
    async def not_json() -> PlainTextResponse:
        return PlainTextResponse("definitely not json")

    return app
