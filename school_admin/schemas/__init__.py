from .base import CamelModel, CreatedResponse
