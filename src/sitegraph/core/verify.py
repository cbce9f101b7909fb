"""Consistency report for build artifacts."""

from collections import Counter
from dataclasses import dataclass, field

from sitegraph.core.artifacts import ArtifactSet


@dataclass
class BuildReport:
    """Summary of a build plus any consistency problems found."""

    document_count: int
    counts_by_type: dict[str, int]
    index_entries: int
    unique_canonicals: int
    pages_with_backlinks: int
    pages_total: int
    backlink_entries: int
    most_linked: list[tuple[str, int]] = field(default_factory=list)
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems

    def render(self) -> str:
        """Plain-text report."""
        lines = ["DOCUMENTS", f"Total: {self.document_count} documents"]
        for content_type, count in sorted(self.counts_by_type.items()):
            lines.append(f"  {content_type}: {count}")

        lines += ["", "LINK INDEX", f"Total entries: {self.index_entries}"]
        lines.append(f"Unique canonicals: {self.unique_canonicals}")
        if self.unique_canonicals:
            ratio = self.index_entries / self.unique_canonicals
            lines.append(f"Entries per document: ~{ratio:.1f}")

        lines += ["", "BACKLINKS"]
        lines.append(f"Pages with backlinks: {self.pages_with_backlinks}/{self.pages_total}")
        lines.append(f"Total backlink entries: {self.backlink_entries}")
        if self.most_linked:
            lines.append("Most linked pages:")
            for canonical, count in self.most_linked:
                lines.append(f"  {canonical}: {count} backlinks")

        if self.problems:
            lines += ["", "PROBLEMS"]
            lines += [f"  {p}" for p in self.problems]
        return "\n".join(lines)


def summarize(artifacts: ArtifactSet, top: int = 5) -> BuildReport:
    """Summarize artifacts and check that they agree with each other."""
    documents = artifacts.documents
    backlinks = artifacts.backlinks
    index = artifacts.link_index

    problems = []
    canonicals = {doc.canonical for doc in documents}
    for doc in documents:
        if doc.is_public and doc.canonical not in backlinks:
            problems.append(f"{doc.canonical} has no backlinks entry")
    for value in sorted(index.canonicals() - canonicals):
        problems.append(f"link index points at unknown document {value}")

    ranked = sorted(backlinks.items(), key=lambda item: len(item[1]), reverse=True)
    most_linked = [(c, len(entries)) for c, entries in ranked[:top] if entries]

    return BuildReport(
        document_count=len(documents),
        counts_by_type=dict(Counter(doc.content_type for doc in documents)),
        index_entries=len(index),
        unique_canonicals=len(index.canonicals()),
        pages_with_backlinks=sum(1 for entries in backlinks.values() if entries),
        pages_total=len(backlinks),
        backlink_entries=sum(len(entries) for entries in backlinks.values()),
        most_linked=most_linked,
        problems=problems,
    )
