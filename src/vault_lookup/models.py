"""Base Pydantic model for vault-lookup.

Example:
    >>> from vault_lookup.models import LookupBaseModel
    >>>
    >>> class MyModel(LookupBaseModel):
    ...     name: str
    >>>
    >>> MyModel(name="test").model_dump()
    {'name': 'test'}
"""

from pydantic import BaseModel, ConfigDict


class LookupBaseModel(BaseModel):
    """Base model for all vault-lookup Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable so one call cannot leak
      state into another

    Models that must carry host-specific keys override ``extra``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
