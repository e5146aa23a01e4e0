"""Session state snapshot."""

from pydantic import BaseModel, ConfigDict, computed_field

from mediconnect.models.identity import Identity


class SessionState(BaseModel):
    """Immutable view of the session store at one point in time."""

    model_config = ConfigDict(frozen=True)

    identity: Identity | None = None
    is_loading: bool = False
    version: int = 0

    @computed_field
    @property
    def is_authenticated(self) -> bool:
        """True iff an identity is held."""
        return self.identity is not None
