import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from presse.models import SentimentEntry, ThemeConfig, WeekBucket

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


def format_number_fr(value: int) -> str:
    """Group thousands the way ``toLocaleString('fr-FR')`` does (narrow nbsp)."""
    return f"{int(value):,}".replace(",", "\u202f")


def make_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["fr_number"] = format_number_fr
    return env


@dataclass
class RenderContext:
    weeks: List[WeekBucket]  # sorted by week key
    themes: ThemeConfig
    sentiment: Mapping[str, SentimentEntry] = field(default_factory=dict)
    top_themes: int = 5


class Renderer(ABC):
    name: str
    template_name: str

    def __init__(self, env: Optional[Environment] = None):
        self.env = env or make_environment()

    @abstractmethod
    def build_context(self, ctx: RenderContext) -> Dict[str, Any]:
        ...

    def render(self, ctx: RenderContext) -> str:
        template = self.env.get_template(self.template_name)
        return template.render(**self.build_context(ctx))
