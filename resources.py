"""
Static registry of the tracked resources.

Each Resource maps to its store and the operations it exposes. The mapping is
built once at import time and the HTTP routes are generated from it, so a
resource without an entry here has no routes at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import schemas
from db_stores import CustomTopicStore, EntitySpec, SqlScopedStore


class Resource(str, Enum):
    """URL names under /api/ for each tracker."""

    DSA = "dsa"
    CS = "cs"
    PROJECTS = "projects"
    MOCKS = "mocks"
    LOGS = "logs"
    CUSTOM_SECTIONS = "custom/sections"
    CUSTOM_TOPICS = "custom/topics"

    @property
    def endpoint(self) -> str:
        return self.value.replace("/", "_")


class Operation(str, Enum):
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


BASIC = frozenset({Operation.LIST, Operation.CREATE, Operation.UPDATE})
FULL = BASIC | {Operation.DELETE}


@dataclass(frozen=True)
class ResourceBinding:
    store: SqlScopedStore

    @property
    def operations(self) -> frozenset[Operation]:
        """DELETE is offered exactly when the store's entity is deletable."""
        return FULL if self.store.spec.deletable else BASIC

    def supports(self, op: Operation) -> bool:
        return op in self.operations


def _spec(table, record, create, patch, order_by="id", deletable=False) -> EntitySpec:
    return EntitySpec(table=table, record=record, create=create, patch=patch,
                      order_by=order_by, deletable=deletable)


REGISTRY: dict[Resource, ResourceBinding] = {
    Resource.DSA: ResourceBinding(
        SqlScopedStore(_spec("dsa_topics", schemas.DsaTopic, schemas.DsaTopicCreate,
                             schemas.DsaTopicPatch)),
    ),
    Resource.CS: ResourceBinding(
        SqlScopedStore(_spec("cs_topics", schemas.CsTopic, schemas.CsTopicCreate,
                             schemas.CsTopicPatch)),
    ),
    Resource.PROJECTS: ResourceBinding(
        SqlScopedStore(_spec("projects", schemas.Project, schemas.ProjectCreate,
                             schemas.ProjectPatch, deletable=True)),
    ),
    Resource.MOCKS: ResourceBinding(
        SqlScopedStore(_spec("mock_interviews", schemas.MockInterview,
                             schemas.MockInterviewCreate, schemas.MockInterviewPatch,
                             order_by="date DESC, id DESC", deletable=True)),
    ),
    Resource.LOGS: ResourceBinding(
        SqlScopedStore(_spec("daily_logs", schemas.DailyLog, schemas.DailyLogCreate,
                             schemas.DailyLogPatch, order_by="date DESC, id DESC")),
    ),
    Resource.CUSTOM_SECTIONS: ResourceBinding(
        SqlScopedStore(_spec("custom_sections", schemas.CustomSection,
                             schemas.CustomSectionCreate, schemas.CustomSectionPatch,
                             deletable=True)),
    ),
    Resource.CUSTOM_TOPICS: ResourceBinding(
        CustomTopicStore(_spec("custom_topics", schemas.CustomTopic,
                               schemas.CustomTopicCreate, schemas.CustomTopicPatch,
                               deletable=True)),
    ),
}

_unbound = set(Resource) - set(REGISTRY)
if _unbound:
    raise RuntimeError(f"Resources without a store: {sorted(r.value for r in _unbound)}")


def store_for(resource: Resource) -> SqlScopedStore:
    return REGISTRY[resource].store
