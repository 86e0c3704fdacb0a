"""Core type definitions shared across all accessdesk modules."""

from __future__ import annotations

from enum import StrEnum


class WCAGLevel(StrEnum):
    """WCAG conformance targets."""

    A = "A"
    AA = "AA"
    AAA = "AAA"


class ClientType(StrEnum):
    A3S = "a3s"
    P15R = "p15r"


class ClientStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    SUSPENDED = "suspended"


class ProjectStatus(StrEnum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class BillingType(StrEnum):
    FIXED = "fixed"
    HOURLY = "hourly"
    MILESTONE = "milestone"


class Severity(StrEnum):
    """Issue severity. Values sort critical-first lexically."""

    CRITICAL = "1_critical"
    HIGH = "2_high"
    MEDIUM = "3_medium"
    LOW = "4_low"


class IssueType(StrEnum):
    AUTOMATED_TOOLS = "automated_tools"
    SCREEN_READER = "screen_reader"
    KEYBOARD_NAVIGATION = "keyboard_navigation"
    COLOR_CONTRAST = "color_contrast"
    TEXT_SPACING = "text_spacing"
    BROWSER_ZOOM = "browser_zoom"
    OTHER = "other"


class ConformanceLevel(StrEnum):
    LEVEL_A = "level_a"
    LEVEL_AA = "level_aa"
    LEVEL_AAA = "level_aaa"


class DevStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    BLOCKED = "blocked"
    THIRD_PARTY = "3rd_party"
    WONT_FIX = "wont_fix"


class QaStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FIXED = "fixed"
    VERIFIED = "verified"
    FAILED = "failed"
    THIRD_PARTY = "3rd_party"


class EntityKind(StrEnum):
    """Discriminant tag for records in the combined clients + projects view."""

    CLIENT = "client"
    PROJECT = "project"
