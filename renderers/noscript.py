from typing import Any, Dict

from presse.text import add_ellipsis_if_truncated
from renderers.base import RenderContext, Renderer


class NoscriptRenderer(Renderer):
    """Static weekly summaries for clients without JavaScript."""

    name = "noscript"
    template_name = "noscript.html.j2"

    def build_context(self, ctx: RenderContext) -> Dict[str, Any]:
        weeks = []
        for bucket in ctx.weeks:
            top = bucket.top_article
            weeks.append({
                "key": bucket.key,
                "article_count": len(bucket.articles),
                "total_engagement": bucket.total_engagement,
                "themes": bucket.top_themes(ctx.top_themes),
                "top_text": add_ellipsis_if_truncated(top.text) if top else "",
                "top_author": top.screen_name if top else "",
                "has_top": top is not None,
            })
        return {"weeks": weeks}
