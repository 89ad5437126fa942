"""Session continuation flags – detection and the synthesized ``sessionId`` option."""

from __future__ import annotations

from dataclasses import dataclass

from cli_bridge.domain.capability import CliOption, CliToolMetadata, OptionType

SESSION_ID_KEY = "sessionId"
LATEST_SESSION = "latest"

_CONTINUE_NAMES = ("continue",)
_SESSION_NAMES = ("session", "session-id")
_RESUME_NAMES = ("resume",)


@dataclass(frozen=True)
class SessionFlags:
    continue_: CliOption | None = None
    session: CliOption | None = None
    resume: CliOption | None = None

    @property
    def any(self) -> bool:
        return bool(self.continue_ or self.session or self.resume)


def _first(metadata: CliToolMetadata, names: tuple[str, ...]) -> CliOption | None:
    for name in names:
        opt = metadata.find_option(name)
        if opt is not None:
            return opt
    return None


def find_session_flags(metadata: CliToolMetadata) -> SessionFlags:
    return SessionFlags(
        continue_=_first(metadata, _CONTINUE_NAMES),
        session=_first(metadata, _SESSION_NAMES),
        resume=_first(metadata, _RESUME_NAMES),
    )


def with_session_option(metadata: CliToolMetadata) -> CliToolMetadata:
    """Return *metadata* with a ``sessionId`` option when the tool can resume sessions.

    The option points at the flag the builder would use for an explicit id;
    the model is returned unchanged if it has no session flags or already
    exposes ``sessionId``.
    """
    if metadata.find_option(SESSION_ID_KEY) is not None:
        return metadata
    flags = find_session_flags(metadata)
    if not flags.any:
        return metadata

    target = flags.session or flags.resume or flags.continue_
    assert target is not None
    if flags.continue_ is not None and target is flags.continue_:
        description = f"Pass '{LATEST_SESSION}' to continue the most recent session."
    elif flags.continue_ is not None:
        description = (
            f"Session ID to resume a previous conversation. "
            f"Use '{LATEST_SESSION}' to continue the most recent session."
        )
    else:
        description = "Session ID to resume a previous conversation."

    session_option = CliOption(
        name=SESSION_ID_KEY,
        flag=target.flag,
        type=OptionType.STRING,
        description=description,
    )
    return metadata.with_overrides(options=metadata.options + (session_option,))
