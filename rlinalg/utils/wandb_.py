"""This module provides utility functions for working with Weights and Biases."""

import os


__all__ = ["set_wandb_api_key", "_get_wandb_kwargs"]


def set_wandb_api_key(api_key: str):
    """Set the API key for Weights and Biases.

    Args:
        api_key (str): The API key provided by Weights and Biases.
    """
    os.environ["WANDB_API_KEY"] = api_key


def _get_wandb_kwargs(wandb_init_kwargs: dict, run_config: dict) -> dict:
    """Merge user supplied ``wandb.init`` arguments with an internal run config.

    Args:
        wandb_init_kwargs (dict): Keyword arguments for ``wandb.init``.
        run_config (dict): Configuration describing the solver being run.

    Returns:
        dict: The merged keyword arguments.
    """
    wandb_kwargs = {"config": dict(run_config)}
    for key, value in wandb_init_kwargs.items():
        if key == "config":
            # Merge the config dictionary
            wandb_kwargs["config"].update(value)
        else:
            wandb_kwargs[key] = value
    return wandb_kwargs
