from pydantic import BaseModel, ConfigDict


class BaseGolfModel(BaseModel):
    """Shared configuration for domain models."""
    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)
