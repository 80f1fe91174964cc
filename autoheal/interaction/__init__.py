from autoheal.interaction.executor import InteractionExecutor

__all__ = ["InteractionExecutor"]
