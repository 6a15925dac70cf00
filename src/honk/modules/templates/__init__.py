from .registry import TemplateMeta, TemplateRegistry, UnknownTemplateError

__all__ = ["TemplateMeta", "TemplateRegistry", "UnknownTemplateError"]
