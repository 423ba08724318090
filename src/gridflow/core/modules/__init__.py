"""Grid feature modules, one per render stage."""

from gridflow.core.modules.base import GridModule

__all__ = ["GridModule"]
