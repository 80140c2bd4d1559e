from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from workerplan.modules.upgrader import (
    NodePlan,
    PlanChange,
    Process,
    plan_change,
    update_only_required,
    upgrade_required,
    upsert_env_var,
)

router = APIRouter(prefix="/plan")


class DiffRequest(BaseModel):
    new: Optional[NodePlan] = None
    old: Optional[NodePlan] = None


class DiffResponse(BaseModel):
    change: PlanChange
    upgrade_required: bool
    update_only_required: bool


class EnvRequest(BaseModel):
    process: Process
    var: str


@router.post("/diff", response_model=DiffResponse)
def diff(req: DiffRequest):
    upgrade = upgrade_required(req.new, req.old)
    update_only = update_only_required(req.new, req.old)
    return DiffResponse(
        change=plan_change(upgrade, update_only),
        upgrade_required=upgrade,
        update_only_required=update_only,
    )


@router.post("/env")
def set_env(req: EnvRequest):
    return upsert_env_var(req.process, req.var).model_dump(by_alias=True, exclude_none=True)
