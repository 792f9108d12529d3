"""Report payload models -- the crawler / operator submission body

A payload carries the per-link results of one backlink task:
created links, indexed blogs with their interlinks, issues and summary counts.
Unknown keys are kept so the stored payload matches what was submitted.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import LinkStatus


class CreatedLink(BaseModel):
    """A backlink created by the assignee"""

    model_config = ConfigDict(extra="allow")

    url: str = Field(description="Backlink URL")
    status: LinkStatus = Field(description="working / dead")
    anchor_text: str | None = Field(default=None, description="Anchor text")
    target_url: str | None = Field(default=None, description="Page the link points to")


class Interlink(BaseModel):
    """A link between two pages of the same indexed blog"""

    model_config = ConfigDict(extra="allow")

    url: str | None = None
    status: LinkStatus


class IndexedBlog(BaseModel):
    """A blog post checked for indexing and interlinks"""

    model_config = ConfigDict(extra="allow")

    blog_url: str | None = Field(default=None, description="Blog post URL")
    is_indexed: bool = Field(description="Whether the search engine indexed the post")
    interlink_count: int = Field(default=0, ge=0, description="Number of interlinks")
    interlinks: list[Interlink] = Field(default_factory=list)

    @property
    def has_dead_interlink(self) -> bool:
        return any(i.status == LinkStatus.DEAD for i in self.interlinks)


class ReportIssue(BaseModel):
    """An issue flagged by the crawler (e.g. type="irrelevant_link")"""

    model_config = ConfigDict(extra="allow")

    type: str = ""
    severity: str = Field(default="warning", description="critical / warning")
    url: str | None = None
    message: str = ""


class ReportSummary(BaseModel):
    """Aggregate counts of a report"""

    model_config = ConfigDict(extra="allow")

    total_created_links: int = Field(default=0, ge=0)
    working_links: int = Field(default=0, ge=0)
    dead_links: int = Field(default=0, ge=0)
    total_indexed_blogs: int = Field(default=0, ge=0)
    indexed_count: int = Field(default=0, ge=0)
    not_indexed_count: int = Field(default=0, ge=0)
    total_interlinks: int = Field(default=0, ge=0)
    working_interlinks: int = Field(default=0, ge=0)
    dead_interlinks: int = Field(default=0, ge=0)


class BacklinkReportPayload(BaseModel):
    """Full submission payload"""

    model_config = ConfigDict(extra="allow")

    created_links: list[CreatedLink] = Field(default_factory=list)
    indexed_blogs: list[IndexedBlog] = Field(default_factory=list)
    issues: list[ReportIssue] = Field(default_factory=list)
    requires_attention: list[ReportIssue] = Field(default_factory=list)
    summary: ReportSummary = Field(default_factory=ReportSummary)

    @staticmethod
    def derive_summary(
        created_links: list[CreatedLink],
        indexed_blogs: list[IndexedBlog],
    ) -> ReportSummary:
        """Count links and interlinks straight from the lists"""
        dead = sum(1 for link in created_links if link.status == LinkStatus.DEAD)
        indexed = sum(1 for blog in indexed_blogs if blog.is_indexed)
        interlinks = [i for blog in indexed_blogs for i in blog.interlinks]
        dead_interlinks = sum(1 for i in interlinks if i.status == LinkStatus.DEAD)
        return ReportSummary(
            total_created_links=len(created_links),
            working_links=len(created_links) - dead,
            dead_links=dead,
            total_indexed_blogs=len(indexed_blogs),
            indexed_count=indexed,
            not_indexed_count=len(indexed_blogs) - indexed,
            total_interlinks=len(interlinks),
            working_interlinks=len(interlinks) - dead_interlinks,
            dead_interlinks=dead_interlinks,
        )
