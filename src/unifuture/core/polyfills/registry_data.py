"""Static lookup tables for known promise-library layouts.

Each table lists the member names under which third-party libraries
expose a given capability, in lookup order (first present wins).
"""

# ---------------------------------------------------------------------------
# Constructor and factory entry points
# ---------------------------------------------------------------------------

# Q, RSVP and vow expose ``Promise``; when (and Q <= 0.9.7) expose ``promise``.
CONSTRUCTOR_ATTRS: tuple[str, ...] = ("Promise", "promise")

# kew-style libraries expose ``defer()``; otherwise the library itself is the factory.
FACTORY_ATTRS: tuple[str, ...] = ("defer",)

# Release hatch for libraries that install themselves as the ambient constructor.
RELEASE_ATTRS: tuple[str, ...] = ("no_conflict",)

# ---------------------------------------------------------------------------
# Static members
# ---------------------------------------------------------------------------

STATIC_MEMBERS: tuple[str, ...] = ("resolve", "reject", "all", "race")

STATIC_ALIASES: dict[str, tuple[str, ...]] = {
    # bluebird, when; Q spells it ``when``
    "resolve": ("resolve", "when"),
    "reject": ("reject",),
    "all": ("all",),
    # bluebird; when and vow spell it ``any``
    "race": ("race", "any"),
}

# ---------------------------------------------------------------------------
# Marker
# ---------------------------------------------------------------------------

NORMALIZED_MARKER = "__unifuture_normalized__"
