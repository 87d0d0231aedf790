"""Server-rendered HTML for feedr.

One layout, one set of page functions, parameterized by a Theme
(FEEDR_THEME).  Inline HTML keeps the service free of a template engine;
every user-supplied value goes through ``_e`` (html.escape).  Provider
embed markup (Item.html) is the one deliberate exception: it is inserted
as-is because it *is* markup, and it only ever comes from an oEmbed
response, never from a form field.

UI copy is Dutch.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from urllib.parse import quote

from feedr.models.organization import Organization
from feedr.models.wall import Item, Wall
from feedr.services.walls_service import WallDetail

DASHBOARD_PREVIEW_LIMIT = 9


@dataclass(frozen=True, slots=True)
class Theme:
    name: str
    background: str
    panel: str
    text: str
    muted: str
    accent: str
    accent2: str


THEMES: dict[str, Theme] = {
    "light": Theme("light", "#f6f7fb", "#ffffff", "#0b1220", "#5b667a", "#2563eb", "#7c3aed"),
    "dark": Theme("dark", "#0b1020", "#121a2f", "#e8ecf6", "#9aa6bf", "#60a5fa", "#a78bfa"),
    "warm": Theme("warm", "#fbf7f2", "#ffffff", "#1f1a14", "#6f6254", "#ea580c", "#db2777"),
}


def _e(value: object) -> str:
    return html.escape(str(value), quote=True)


def _q(value: str) -> str:
    return quote(value, safe="")


def _styles(theme: Theme) -> str:
    return f"""
:root{{--bg:{theme.background};--panel:{theme.panel};--text:{theme.text};
  --muted:{theme.muted};--accent:{theme.accent};--accent2:{theme.accent2};
  --border:rgba(127,127,127,.22)}}
*{{box-sizing:border-box}}
body{{margin:0;font-family:ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto,Arial;
  background:var(--bg);color:var(--text)}}
a{{color:inherit}}
.top{{border-bottom:1px solid var(--border);background:var(--panel)}}
.top-inner,.container{{max-width:1120px;margin:0 auto;padding:14px 18px}}
.top-inner{{display:flex;justify-content:space-between;align-items:center;gap:12px}}
.brand{{font-weight:900;text-decoration:none}}
.nav{{display:flex;gap:10px;align-items:center}}
.btn{{display:inline-block;text-decoration:none;border:0;cursor:pointer;color:#fff;
  background:linear-gradient(135deg,var(--accent),var(--accent2));padding:10px 12px;
  border-radius:12px;font-weight:800}}
.btn-ghost{{background:transparent;color:var(--text);border:1px solid var(--border)}}
.panel{{border:1px solid var(--border);border-radius:16px;background:var(--panel);padding:14px}}
.section{{margin-top:24px}}
.muted{{color:var(--muted)}}
.error{{color:#c00}}
form{{display:flex;flex-direction:column;gap:10px;max-width:420px}}
label{{display:flex;flex-direction:column;gap:6px;font-size:12px;color:var(--muted)}}
input,select{{padding:10px;border-radius:10px;border:1px solid var(--border)}}
.table{{width:100%;border-collapse:collapse;background:var(--panel)}}
.table th,.table td{{padding:10px;border-bottom:1px solid var(--border);text-align:left}}
.kbd{{font-family:ui-monospace,Menlo,Consolas,monospace}}
.wallgrid{{display:grid;grid-template-columns:repeat(3,1fr);gap:12px}}
@media(max-width:980px){{.wallgrid{{grid-template-columns:1fr}}}}
.item{{border:1px solid var(--border);border-radius:16px;background:var(--panel);
  padding:10px;overflow:hidden}}
.item .meta{{color:var(--muted);font-size:12px;margin-top:8px}}
"""


def layout(*, title: str, body: str, theme: Theme, signed_in: bool) -> str:
    full_title = f"{title} · feedr" if title else "feedr"
    if signed_in:
        nav = (
            '<a href="/dashboard">Dashboard</a>'
            '<a class="btn btn-ghost" href="/logout">Uitloggen</a>'
        )
    else:
        nav = (
            '<a class="btn btn-ghost" href="/login">Inloggen</a>'
            '<a class="btn" href="/signup">Start gratis</a>'
        )
    return f"""<!doctype html>
<html lang="nl">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{_e(full_title)}</title>
  <style>{_styles(theme)}</style>
</head>
<body class="theme-{_e(theme.name)}">
  <header class="top"><div class="top-inner">
    <a class="brand" href="/">feedr</a>
    <nav class="nav">{nav}</nav>
  </div></header>
  <main class="container">{body}</main>
</body>
</html>"""


def item_card(item: Item, *, with_date: bool = False) -> str:
    inner = item.html or (
        f'<a href="{_e(item.url)}" target="_blank" rel="noopener">Open</a>'
    )
    meta = _e(item.provider or item.type)
    if with_date:
        meta += f" · {_e(item.created_at[:16].replace('T', ' '))}"
    return f'<div class="item"><div>{inner}</div><div class="meta">{meta}</div></div>'


def _error_block(error: str | None) -> str:
    return f'<p class="error">{_e(error)}</p>' if error else ""


# ---------------------------------------------------------------------------
# Auth pages
# ---------------------------------------------------------------------------


def signup_page(theme: Theme, *, error: str | None = None) -> str:
    body = f"""
<h1>Start gratis</h1>
<p class="muted">Maak een organisatie aan. Je eerste wall staat direct klaar.</p>
<div class="panel">
  {_error_block(error)}
  <form method="post" action="/signup">
    <label>Organisatienaam<input name="orgName" required></label>
    <label>E-mail<input name="email" type="email" required></label>
    <label>Wachtwoord<input name="password" type="password" minlength="8" required></label>
    <button class="btn" type="submit">Account aanmaken</button>
  </form>
  <p class="muted">Heb je al een account? <a href="/login">Inloggen</a></p>
</div>"""
    return layout(title="Registreren", body=body, theme=theme, signed_in=False)


def login_page(theme: Theme, *, error: str | None = None) -> str:
    body = f"""
<h1>Inloggen</h1>
<div class="panel">
  {_error_block(error)}
  <form method="post" action="/login">
    <label>E-mail<input name="email" type="email" required></label>
    <label>Wachtwoord<input name="password" type="password" required></label>
    <button class="btn" type="submit">Inloggen</button>
  </form>
  <p class="muted">Nog geen account? <a href="/signup">Start gratis</a></p>
</div>"""
    return layout(title="Inloggen", body=body, theme=theme, signed_in=False)


def error_page(theme: Theme, message: str, *, signed_in: bool = False) -> str:
    body = f'<div class="panel"><p>{_e(message)}</p><p><a href="javascript:history.back()">Terug</a></p></div>'
    return layout(title="Fout", body=body, theme=theme, signed_in=signed_in)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def dashboard_page(theme: Theme, org: Organization | None, walls: list[Wall]) -> str:
    rows = "".join(
        f"""
<tr>
  <td><b>{_e(w.name)}</b><div class="muted">/w/{_e(w.slug)}</div></td>
  <td><span class="kbd">{_e(w.slug)}</span></td>
  <td><a href="/w/{_q(w.slug)}" target="_blank" rel="noopener">Open</a></td>
  <td><a href="/dashboard/walls/{_q(w.id)}">Beheer</a></td>
</tr>"""
        for w in walls
    ) or '<tr><td colspan="4" class="muted">Nog geen walls.</td></tr>'

    body = f"""
<h1>Dashboard</h1>
<p class="muted">Organisatie: <b>{_e(org.name if org else "-")}</b> · Plan: <b>{_e(org.plan if org else "free")}</b></p>
<p><a class="btn" href="/dashboard/new-wall">+ Nieuwe wall</a></p>
<section class="section">
  <h2>Jouw walls</h2>
  <table class="table">
    <thead><tr><th>Wall</th><th>Slug</th><th>Publiek</th><th>Beheer</th></tr></thead>
    <tbody>{rows}</tbody>
  </table>
</section>"""
    return layout(title="Dashboard", body=body, theme=theme, signed_in=True)


def new_wall_page(theme: Theme) -> str:
    body = """
<h1>Nieuwe wall</h1>
<div class="panel">
  <form method="post" action="/dashboard/new-wall">
    <label>Naam<input name="name" required></label>
    <label>Slug (in URL)<input name="slug" placeholder="bijv. showroom" required></label>
    <button class="btn" type="submit">Aanmaken</button>
  </form>
  <p class="muted">Tip: slug mag alleen letters, cijfers en streepjes.</p>
</div>"""
    return layout(title="Nieuwe wall", body=body, theme=theme, signed_in=True)


def embed_snippet(base_url: str, slug: str) -> str:
    return (
        "<script>\n"
        "  (function(){\n"
        "    var s=document.createElement('script');\n"
        f"    s.src='{base_url}/widget/feedr.js?wall={_q(slug)}';\n"
        "    s.async=true;\n"
        "    document.currentScript.parentNode.insertBefore(s, document.currentScript);\n"
        "  })();\n"
        "</script>\n"
        f'<div data-feedr-wall="{_e(slug)}"></div>'
    )


def wall_detail_page(theme: Theme, detail: WallDetail, base_url: str) -> str:
    wall = detail.wall
    source_rows = "".join(
        f"<tr><td>{_e(s.type)}</td><td>{_e(s.url)}</td><td>{_e(s.status)}</td></tr>"
        for s in detail.sources
    ) or '<tr><td colspan="3" class="muted">Nog geen bronnen.</td></tr>'
    preview = "".join(
        item_card(it, with_date=True) for it in detail.items[:DASHBOARD_PREVIEW_LIMIT]
    ) or '<div class="muted">Nog geen items.</div>'

    body = f"""
<h1>{_e(wall.name)}</h1>
<p class="muted">Publieke URL:
  <a href="/w/{_q(wall.slug)}" target="_blank" rel="noopener">{_e(base_url)}/w/{_e(wall.slug)}</a></p>
<p><a class="btn btn-ghost" href="/dashboard">Terug</a></p>

<section class="section">
  <h2>Content toevoegen</h2>
  <div class="panel">
    <form method="post" action="/dashboard/walls/{_q(wall.id)}/add-url">
      <label>Platform
        <select name="type">
          <option value="instagram">Instagram</option>
          <option value="tiktok">TikTok</option>
          <option value="youtube">YouTube</option>
        </select>
      </label>
      <label>URL (post/video)<input name="url" placeholder="https://..." required></label>
      <button class="btn" type="submit">Toevoegen</button>
    </form>
  </div>
</section>

<section class="section">
  <h2>Bronnen</h2>
  <table class="table">
    <thead><tr><th>Platform</th><th>URL</th><th>Status</th></tr></thead>
    <tbody>{source_rows}</tbody>
  </table>
</section>

<section class="section">
  <h2>Embed code (JavaScript, geen iframe)</h2>
  <pre class="panel" style="white-space:pre-wrap">{_e(embed_snippet(base_url, wall.slug))}</pre>
</section>

<section class="section">
  <h2>Preview ({len(detail.items)} items)</h2>
  <div class="wallgrid">{preview}</div>
</section>"""
    return layout(title=f"Wall: {wall.name}", body=body, theme=theme, signed_in=True)


# ---------------------------------------------------------------------------
# Public wall
# ---------------------------------------------------------------------------


def public_wall_page(
    theme: Theme, wall: Wall, items: list[Item], *, signed_in: bool
) -> str:
    cards = "".join(item_card(it) for it in items) or (
        '<div class="muted">Nog geen items.</div>'
    )
    body = f"""
<h1>{_e(wall.name)}</h1>
<p class="muted">feedr wall · {len(items)} items</p>
<section class="section"><div class="wallgrid">{cards}</div></section>
<section class="section panel">
  <b>Wil je dit ook?</b> <span class="muted">Maak gratis een account en embed jouw wall op je site.</span>
  <a class="btn" href="/signup">Start gratis</a>
</section>"""
    return layout(title=wall.name, body=body, theme=theme, signed_in=signed_in)
