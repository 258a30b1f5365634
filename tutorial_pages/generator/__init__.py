"""Utilities for composing, rendering, and writing tutorial pages."""

from .composer import CompositionError, ContentComposer
from .models import RenderedBlock, RenderedPage
from .page_generator import TutorialPageGenerator
from .renderer import HtmlContentRenderer
from .step_links import StepLinkExtension

__all__ = [
    "CompositionError",
    "ContentComposer",
    "HtmlContentRenderer",
    "RenderedBlock",
    "RenderedPage",
    "StepLinkExtension",
    "TutorialPageGenerator",
]
