"""Server-rendered HTML for the admin panel."""

from html import escape
from urllib.parse import urlencode

from photobooth.domain.photos import OffsetPage, PhotoRecord

_STYLES = """
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0; background: #f5f5f7; }
      .admin-header { background: #222; color: #fff; padding: 1rem 2rem; display: flex; gap: 2rem; align-items: center; }
      .admin-header a { color: #fff; margin-right: 1rem; }
      .admin-main { padding: 2rem; }
      table { width: 100%; border-collapse: collapse; background: #fff; }
      th, td { padding: 0.6rem; border-bottom: 1px solid #eee; text-align: left; }
      .btn { display: inline-block; padding: 0.4rem 0.8rem; background: #0d6efd; color: #fff; border: 0; border-radius: 4px; text-decoration: none; cursor: pointer; }
      .btn-danger { background: #dc3545; }
      .btn-secondary { background: #6c757d; }
      .notice { background: #d1e7dd; padding: 0.75rem 1rem; border-radius: 4px; margin-bottom: 1rem; }
      .empty { text-align: center; padding: 2rem; }
      .pagination { margin-top: 2rem; text-align: center; }
      img.preview { width: 80px; height: 80px; object-fit: cover; border-radius: 4px; }
"""


def render_layout(title: str, content: str) -> str:
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{escape(title)} - Photobooth Admin</title>
    <style>{_STYLES}</style>
  </head>
  <body>
    <header class="admin-header">
      <h1>Photobooth Admin</h1>
      <nav><a href="/admin">Dashboard</a><a href="/admin/photos">Photos</a></nav>
    </header>
    <main class="admin-main">
{content}
    </main>
  </body>
</html>
"""


def render_dashboard() -> str:
    """Landing page; renders without touching the database."""
    return render_layout(
        "Dashboard",
        """      <h2>Dashboard</h2>
      <p>Manage photos uploaded from the photobooth.</p>
      <p><a class="btn" href="/admin/photos">Browse photos</a></p>""",
    )


def _size_kb(size: int) -> str:
    return f"{(size or 0) / 1024:.2f} KB"


def _photo_row(photo: PhotoRecord) -> str:
    photo_id = escape(str(photo.id))
    url = escape(photo.blob_url or "")
    return f"""        <tr>
          <td><img class="preview" src="{url}" alt="Preview" loading="lazy" /></td>
          <td><a href="/admin/photos/{photo_id}">{escape(photo.original_name or "unnamed")}</a></td>
          <td>{escape(photo.mime_type or "unknown")}</td>
          <td>{_size_kb(photo.size)}</td>
          <td>{escape(photo.created_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip())}</td>
          <td>
            <a class="btn" href="{url}" target="_blank" rel="noopener">View</a>
            <a class="btn" href="/admin/photos/{photo_id}/download">Download</a>
            <form method="post" action="/admin/photos/{photo_id}/delete" style="display: inline;" onsubmit="return confirm('Delete this photo?');">
              <button type="submit" class="btn btn-danger">Delete</button>
            </form>
          </td>
        </tr>"""


def _page_link(page: int, limit: int, query: str | None, label: str) -> str:
    params: dict[str, str | int] = {"page": page, "limit": limit}
    if query:
        params["q"] = query
    return f'<a class="btn" href="/admin/photos?{escape(urlencode(params))}">{label}</a>'


def render_photo_list(
    result: OffsetPage, query: str | None, deleted: bool = False
) -> str:
    """Searchable, paginated photo table."""
    if result.items:
        rows = "\n".join(_photo_row(photo) for photo in result.items)
    else:
        rows = '        <tr><td colspan="6" class="empty">No photos found.</td></tr>'
    clear = (
        ' <a class="btn btn-secondary" href="/admin/photos">Clear</a>' if query else ""
    )
    notice = '      <div class="notice">Photo deleted.</div>\n' if deleted else ""

    pagination = ""
    if result.total_pages > 1:
        parts = []
        if result.page > 1:
            parts.append(
                _page_link(result.page - 1, result.limit, query, "&larr; Previous")
            )
        parts.append(
            f"<span>Page {result.page} of {result.total_pages} "
            f"({result.total} total)</span>"
        )
        if result.page < result.total_pages:
            parts.append(_page_link(result.page + 1, result.limit, query, "Next &rarr;"))
        pagination = f'      <div class="pagination">{" ".join(parts)}</div>'

    content = f"""{notice}      <h2>Photo Management</h2>
      <form method="get" action="/admin/photos">
        <input type="text" name="q" placeholder="Search by filename..." value="{escape(query or "")}" />
        <button type="submit" class="btn">Search</button>{clear}
      </form>
      <table>
        <thead>
          <tr><th>Preview</th><th>Original Name</th><th>MIME Type</th><th>Size</th><th>Uploaded</th><th>Actions</th></tr>
        </thead>
        <tbody>
{rows}
        </tbody>
      </table>
{pagination}"""
    return render_layout("Photos", content)


def render_photo_detail(photo: PhotoRecord) -> str:
    photo_id = escape(str(photo.id))
    preview = (
        f'<img src="{escape(photo.blob_url)}" alt="Photo" style="max-width: 100%;" />'
        if photo.has_url
        else "<p>File not available (legacy record).</p>"
    )
    updated = photo.updated_at.isoformat() if photo.updated_at else "-"
    content = f"""      <p><a href="/admin/photos">&larr; Back to photos</a></p>
      <h2>{escape(photo.original_name or "unnamed")}</h2>
      {preview}
      <table>
        <tr><th>ID</th><td>{photo_id}</td></tr>
        <tr><th>MIME Type</th><td>{escape(photo.mime_type)}</td></tr>
        <tr><th>Size</th><td>{_size_kb(photo.size)}</td></tr>
        <tr><th>Uploaded</th><td>{escape(photo.created_at.isoformat())}</td></tr>
        <tr><th>Updated</th><td>{escape(updated)}</td></tr>
      </table>
      <p>
        <a class="btn" href="/admin/photos/{photo_id}/download">Download</a>
        <form method="post" action="/admin/photos/{photo_id}/delete" style="display: inline;" onsubmit="return confirm('Delete this photo?');">
          <button type="submit" class="btn btn-danger">Delete</button>
        </form>
      </p>"""
    return render_layout(photo.original_name or "Photo", content)
