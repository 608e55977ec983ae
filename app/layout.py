"""
Shared HTML layout and styling helpers.
"""
import html

from fastapi.responses import HTMLResponse

_STYLES = """
  :root { color-scheme: light dark; }
  * { box-sizing: border-box; }
  body {
    font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
    margin: 0;
    background: #0b1120;
    color: #e2e8f0;
  }
  .page { max-width: 1100px; margin: 0 auto; padding: 1.5rem 1rem 3rem; }
  header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    padding: 0.75rem 1rem;
    border: 1px solid #1e293b;
    border-radius: 0.75rem;
    background: linear-gradient(90deg, rgba(248,113,113,0.08), rgba(250,204,21,0.08));
  }
  header h1 { font-size: 1.4rem; margin: 0; }
  nav { display: flex; gap: 0.6rem; }
  nav a {
    color: #e2e8f0;
    text-decoration: none;
    padding: 6px 10px;
    border-radius: 8px;
    background: rgba(255,255,255,0.05);
  }
  nav a:hover { color: #facc15; }
  .signed-in { font-size: 0.8rem; color: #94a3b8; margin-top: 0.25rem; }
  main { margin-top: 1.25rem; }
  a { color: #38bdf8; }
  .card {
    border: 1px solid #1e293b;
    border-radius: 0.75rem;
    padding: 1rem 1.25rem;
    background: #0f172a;
  }
  .muted { color: #94a3b8; font-size: 0.85rem; }
  .error { color: #f87171; }
  .toolbar { display: flex; gap: 0.5rem; flex-wrap: wrap; align-items: end; margin-bottom: 1rem; }
  .toolbar label { font-size: 0.8rem; color: #94a3b8; display: block; }
  input, select {
    padding: 0.45rem;
    border-radius: 0.375rem;
    border: 1px solid #475569;
    background: #0b1120;
    color: #e2e8f0;
  }
  button {
    padding: 0.45rem 0.9rem;
    border-radius: 0.5rem;
    border: none;
    background: #facc15;
    color: #1c1917;
    font-weight: 600;
    cursor: pointer;
  }
  .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(300px, 1fr)); gap: 1rem; }
  .repo h3 { margin: 0 0 0.25rem; font-size: 1.05rem; }
  .repo .meta { display: flex; gap: 0.75rem; font-size: 0.8rem; color: #94a3b8; margin: 0.5rem 0; }
  .bar { height: 8px; border-radius: 4px; background: #1e293b; overflow: hidden; }
  .bar span { display: block; height: 100%; background: #22c55e; }
  .status-success { border-left: 4px solid #22c55e; }
  .status-info { border-left: 4px solid #38bdf8; }
  .status-warning { border-left: 4px solid #f59e0b; }
  .status-destructive { border-left: 4px solid #ef4444; }
  .roast { font-style: italic; font-size: 0.85rem; color: #fcd34d; }
  .inline-form { display: inline-flex; gap: 0.4rem; align-items: center; margin-top: 0.5rem; }
  .inline-form input[type="number"] { width: 5rem; }
  .pagination { display: flex; gap: 0.4rem; margin-top: 1.25rem; flex-wrap: wrap; }
  .pagination a, .pagination strong { padding: 4px 10px; border-radius: 6px; border: 1px solid #1e293b; }
  .stats { display: flex; gap: 0.75rem; margin-bottom: 1rem; flex-wrap: wrap; }
  .stat { padding: 0.6rem 0.8rem; border-radius: 0.75rem; border: 1px solid #1e293b; min-width: 140px; }
  .stat .label { font-size: 0.75rem; color: #94a3b8; }
  .stat .value { font-size: 1.2rem; font-weight: 600; }
  footer { margin-top: 2.5rem; text-align: center; font-size: 0.85rem; color: #94a3b8; }
"""


def escape(value) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def render_page(title: str, body: str, user: dict | None = None, status_code: int = 200) -> HTMLResponse:
    """
    Shared layout: nav bar and an optional 'signed in as' line.
    """
    if user:
        auth_links = """
          <a href="/dashboard">📋 Dashboard</a>
          <a href="/logout">Logout</a>
        """
        signed_in_text = f"Signed in as <strong>{escape(user.get('github_username'))}</strong>"
    else:
        auth_links = '<a href="/signin">Sign in with GitHub</a>'
        signed_in_text = "Not signed in"

    page = f"""
    <!DOCTYPE html>
    <html>
      <head>
        <meta charset="utf-8" />
        <meta name="viewport" content="width=device-width, initial-scale=1" />
        <title>{escape(title)}</title>
        <style>{_STYLES}</style>
      </head>
      <body>
        <div class="page">
          <header>
            <div>
              <h1>{escape(title)}</h1>
              <div class="signed-in">{signed_in_text}</div>
            </div>
            <nav>
              <a href="/">🏠 Home</a>
              {auth_links}
            </nav>
          </header>
          <main>
            {body}
          </main>
          <footer>Job Not Finished. Ship it already.</footer>
        </div>
      </body>
    </html>
    """
    return HTMLResponse(content=page, status_code=status_code)
