"""
Share page generation.
Builds the HTML shim that carries Open Graph / Twitter card tags for a
preview image and forwards browsers to the tree page.
"""
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.config import Settings
from ..utils.security import encode_path_segment, normalize_origin

DEFAULT_TEXT = "デフォルトテキスト"
DEFAULT_USER_ID = "デフォルトユーザー"
DEFAULT_TREE_ID = "デフォルトツリー"


@dataclass(frozen=True)
class SharePage:
    html: str
    image_url: str
    redirect_url: str


class SharePageBuilder:
    """Renders the share page template."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.templates_dir = Path(__file__).parent.parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.template = self.env.get_template("share_page.html")

    def image_url(self, origin: str, text: str) -> str:
        return (
            f"{normalize_origin(origin)}/image/{self.settings.SHARE_IMAGE_WIDTH}/"
            f"{self.settings.SHARE_IMAGE_HEIGHT}/{encode_path_segment(text)}"
        )

    def redirect_url(self, user_id: str, tree_id: str) -> str:
        return (
            f"{normalize_origin(self.settings.FRONTEND_ORIGIN)}/trees/"
            f"{encode_path_segment(user_id)}/{encode_path_segment(tree_id)}"
        )

    def build(self, origin: str, text: str, user_id: str, tree_id: str) -> SharePage:
        """
        Render the share page for already-decoded ``text``.

        Args:
            origin: Public origin of this service (scheme://host[:port])
            text: Preview text, shown as the page title and drawn in the image
            user_id: Owner of the tree the page redirects to
            tree_id: Tree the page redirects to
        """
        image_url = self.image_url(origin, text)
        redirect_url = self.redirect_url(user_id, tree_id)
        html = self.template.render(
            title=text,
            page_url=normalize_origin(origin),
            image_url=image_url,
            description=self.settings.OG_DESCRIPTION,
            twitter_site=self.settings.TWITTER_SITE,
            redirect_url=redirect_url,
            redirect_delay_ms=self.settings.REDIRECT_DELAY_MS,
        )
        return SharePage(html=html, image_url=image_url, redirect_url=redirect_url)
