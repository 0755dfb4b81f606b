"""
Pydantic schemas for the FastAPI local API.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel

FocusModeName = Literal["deep-work", "research", "casual"]

# ── Host events ────────────────────────────────────────────────────────────

class TabActivatedIn(BaseModel):
    tab_id: int
    url: Optional[str] = None


class TabUpdatedIn(BaseModel):
    tab_id: int
    url: Optional[str] = None
    status: Optional[str] = Field(None, description="loading | complete")


class TabRemovedIn(BaseModel):
    tab_id: int


class IdleStateIn(BaseModel):
    state: Literal["active", "idle", "locked"]


# ── Extension messages (camelCase as sent by the extension) ────────────────

class _Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ContentSignalsMsg(_Message):
    type: Literal["CONTENT_SIGNALS"]
    backspace_ratio: float = Field(0.0, alias="backspaceRatio", ge=0.0, le=1.0)
    mouse_jitter: float = Field(0.0, alias="mouseJitter", ge=0.0)
    scroll_velocity: float = Field(0.0, alias="scrollVelocity", ge=0.0)
    is_typing_recently: bool = Field(False, alias="isTypingRecently")
    is_scrolling_recently: bool = Field(False, alias="isScrollingRecently")
    tab_id: Optional[int] = Field(None, alias="tabId")


class ResetSessionStartedMsg(_Message):
    type: Literal["RESET_SESSION_STARTED"]


class SetModeMsg(_Message):
    type: Literal["SET_MODE"]
    mode: FocusModeName


class SetEnabledMsg(_Message):
    type: Literal["SET_ENABLED"]
    enabled: bool


class UpdateCustomDomainsMsg(_Message):
    type: Literal["UPDATE_CUSTOM_DOMAINS"]
    custom_productive: Optional[List[str]] = Field(None, alias="customProductive")
    custom_distraction: Optional[List[str]] = Field(None, alias="customDistraction")


class GetMetricsMsg(_Message):
    type: Literal["GET_METRICS"]


class CloseTabMsg(_Message):
    type: Literal["CLOSE_TAB"]
    tab_id: Optional[int] = Field(None, alias="tabId")


class MessageIn(RootModel):
    root: Annotated[
        Union[
            ContentSignalsMsg,
            ResetSessionStartedMsg,
            SetModeMsg,
            SetEnabledMsg,
            UpdateCustomDomainsMsg,
            GetMetricsMsg,
            CloseTabMsg,
        ],
        Field(discriminator="type"),
    ]


# ── Raw page samples ───────────────────────────────────────────────────────

class RawSampleIn(BaseModel):
    kind: Literal["key", "mouse", "scroll"]
    ts: Optional[float] = None
    is_backspace: bool = False
    x: float = 0.0
    y: float = 0.0


class SampleBatchIn(BaseModel):
    tab_id: int
    samples: List[RawSampleIn] = Field(default_factory=list)


# ── Metrics ────────────────────────────────────────────────────────────────

class SignalFlags(BaseModel):
    idle: bool
    tab_switch: bool
    backspace: bool
    jitter: bool


class StatsOut(BaseModel):
    date: str
    distractions_detected: int
    reset_sessions: int
    total_idle_seconds: int


class MetricsOut(BaseModel):
    score: float = Field(..., ge=0.0, le=10.0)
    is_distracted: bool
    state: Literal["FOCUSED", "DISTRACTED"]
    active_signal_count: int
    classification: Optional[str]
    signals: SignalFlags
    tab_switches: int
    tab_switch_limit: int
    is_idle: bool
    idle_secs: int
    idle_threshold: float
    backspace_ratio: int
    mouse_jitter: float
    category: str
    mode: str
    enabled: bool
    stats: StatsOut


# ── Domains ────────────────────────────────────────────────────────────────

class DomainListsOut(BaseModel):
    builtin_productive: List[str]
    builtin_distraction: List[str]
    custom_productive: List[str]
    custom_distraction: List[str]


class DomainCheckOut(BaseModel):
    url: str
    hostname: str
    category: str


# ── Tabs ───────────────────────────────────────────────────────────────────

class TabMessagesOut(BaseModel):
    tab_id: int
    messages: List[Dict[str, Union[str, int, float, bool, None]]]


class CloseRequestsOut(BaseModel):
    tab_ids: List[int]
