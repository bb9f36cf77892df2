"""Configuration — pydantic-settings models."""

from sol_sender.config.settings import AppConfig, RPCConfig, SenderConfig

__all__ = ["AppConfig", "RPCConfig", "SenderConfig"]
