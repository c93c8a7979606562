from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


def engagement(likes: int, reposts: int) -> int:
    """likes + 2 * reposts, never negative."""
    return max(0, likes or 0) + 2 * max(0, reposts or 0)


@dataclass(frozen=True)
class Article:
    date: str  # valeur brute, recopiee telle quelle dans les shards
    published_at: datetime  # date parsee, dans le fuseau du build
    screen_name: str
    text: str  # texte brut (mojibake, echappements...)
    likes: int = 0
    reposts: int = 0
    avatar_url: str = ""
    publication_id: str = ""  # at://<did>/<collection>/<rkey>

    @property
    def engagement(self) -> int:
        return engagement(self.likes, self.reposts)


@dataclass(frozen=True)
class CleanedArticle:
    date: str
    published_at: datetime
    screen_name: str
    text: str
    likes: int = 0
    reposts: int = 0
    avatar_url: str = ""
    publication_id: str = ""
    urls: Tuple[str, ...] = ()

    @property
    def engagement(self) -> int:
        return engagement(self.likes, self.reposts)

    @property
    def month(self) -> str:
        return self.published_at.strftime("%Y-%m")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "date": self.date,
            "screen_name": self.screen_name,
            "text": self.text,
            "likes": self.likes,
            "reposts": self.reposts,
            "avatar_url": self.avatar_url,
            "publication_id": self.publication_id,
        }
        if self.urls:
            out["urls"] = list(self.urls)
        return out


@dataclass(frozen=True)
class UrlCacheEntry:
    resolved: str
    status: int


@dataclass(frozen=True)
class ThemeConfig:
    """Theme name -> keywords, in configuration order.

    The fallback theme is never keyword-matched; it is returned alone when
    nothing else matches.
    """
    themes: Mapping[str, Tuple[str, ...]]
    fallback: str = "Autres"
    colors: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, themes: Mapping[str, Any], fallback: str = "Autres",
                     colors: Optional[Mapping[str, str]] = None) -> "ThemeConfig":
        frozen = {str(k): tuple(str(kw) for kw in (v or ())) for k, v in themes.items()}
        return cls(
            themes=MappingProxyType(frozen),
            fallback=fallback,
            colors=MappingProxyType(dict(colors or {})),
        )

    def names(self) -> List[str]:
        return list(self.themes.keys())

    def color(self, theme: str, default: str = "#999") -> str:
        return self.colors.get(theme) or default


@dataclass(frozen=True)
class SentimentEntry:
    category: str
    average_score: float = 0.0
    emoji: str = ""


@dataclass
class WeekBucket:
    key: str
    articles: List[CleanedArticle] = field(default_factory=list)
    scores: Dict[str, int] = field(default_factory=dict)
    top_article: Optional[CleanedArticle] = None
    max_engagement: int = 0

    def add(self, article: CleanedArticle, themes: List[str]) -> None:
        score = article.engagement
        self.articles.append(article)
        for theme in themes:
            self.scores[theme] = self.scores.get(theme, 0) + score
        # premier article = top initial; ensuite strictement superieur seulement
        if self.top_article is None or score > self.max_engagement:
            self.top_article = article
            self.max_engagement = score

    @property
    def total_engagement(self) -> int:
        return sum(self.scores.values())

    def top_themes(self, limit: int = 5) -> List[Tuple[str, int]]:
        ranked = sorted(self.scores.items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:limit]
