"""
Input injection
"""
from .base import BaseInput, InputError
from .pyautogui_input import PyAutoGuiInput

__all__ = ["BaseInput", "InputError", "PyAutoGuiInput"]
