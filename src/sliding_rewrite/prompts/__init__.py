from .prompt import Prompt
from .prompts_library import PromptsLibrary, default_prompt

__all__ = [
    "Prompt",
    "PromptsLibrary",
    "default_prompt",
]
