"""
Baseline reference data loaded by the schema convergence engine.

Bump ``SEED_VERSION`` whenever any list in this package changes; the next
cold start then replaces every seed-originated row.

Seed identifiers live in a reserved range that ``uuid.uuid4()`` can never
produce: ``00000000-0000-0000-KKKK-NNNNNNNNNNNN`` (version nibble 0 instead
of 4). ``KKKK`` is the entity kind, ``N`` the ordinal inside that kind.
"""

SEED_VERSION = 3

SEED_ID_PREFIX = "00000000-0000-0000-"

# Entity kinds inside the reserved range
KIND_SYSTEM = 0x0
KIND_ELEMENT = 0x1
KIND_PROJECT = 0x2
KIND_MILESTONE = 0x3
KIND_TASK = 0x4
KIND_WORKING_GROUP = 0x5
KIND_CONTENT = 0x6
KIND_TAG = 0x7


def seed_id(kind: int, n: int) -> str:
    return f"{SEED_ID_PREFIX}{kind:04x}-{n:012x}"


def is_seed_id(value: str | None) -> bool:
    return bool(value) and value.startswith(SEED_ID_PREFIX)


SYSTEM_USER_ID = seed_id(KIND_SYSTEM, 0)

SYSTEM_USER = {
    "id": SYSTEM_USER_ID,
    "email": "system@ple.local",
    "display_name": "PLE System",
    "role": "admin",
    "bio": "Owner of seeded reference data. Cannot sign in.",
    "is_active": False,
}
