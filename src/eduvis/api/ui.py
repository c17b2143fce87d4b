"""Browser form front-end served by the API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from eduvis.api.sessions import new_session_id, set_session_cookie

if TYPE_CHECKING:
    from eduvis.containers import AppContainer

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Serve the form page and start a fresh session.

    History only lives as long as the page: loading it again drops the
    previous session and its history.
    """
    container: AppContainer = request.app.state.container
    cookie_name = container.settings.session_cookie_name
    previous = request.cookies.get(cookie_name)
    if previous:
        container.form_controller.discard(previous)
    response = HTMLResponse(_INDEX_HTML)
    set_session_cookie(response, cookie_name, new_session_id())
    return response


_INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>EduVis AI</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0; display: flex; min-height: 100vh; }
      aside { width: 280px; border-right: 1px solid #ddd; padding: 1rem; overflow-y: auto; }
      main { flex: 1; display: grid; grid-template-columns: 1fr 1fr; gap: 2rem; padding: 2rem; }
      .card { border: 1px solid #ddd; border-radius: 8px; padding: 1rem; }
      .row { margin-bottom: 1rem; }
      textarea, select { width: 100%; padding: 0.4rem; box-sizing: border-box; }
      button { padding: 0.5rem 0.8rem; }
      .field-error { color: #b00020; font-size: 0.85rem; }
      #result { min-height: 320px; border: 1px dashed #bbb; border-radius: 8px;
                display: flex; align-items: center; justify-content: center; padding: 0.5rem; }
      #result img { max-width: 100%; max-height: 480px; }
      .error { color: #b00020; font-weight: 600; text-align: center; }
      .history-item { display: block; width: 100%; text-align: left; margin-bottom: 0.6rem;
                      border: 1px solid #ddd; border-radius: 6px; background: #fff; cursor: pointer; }
      .history-item img { width: 100%; height: 90px; object-fit: cover; }
      .muted { color: #777; font-size: 0.8rem; }
    </style>
  </head>
  <body>
    <aside>
      <h1>EduVis AI</h1>
      <h2>History</h2>
      <div id="history"><p class="muted">No visuals generated yet.</p></div>
    </aside>
    <main>
      <section class="card">
        <h2>Create Educational Visual</h2>
        <p class="muted">Enter a concept, or upload an image to explain, and select a domain.</p>
        <form id="form">
          <div class="row">
            <label for="prompt">Concept / Prompt</label>
            <textarea id="prompt" rows="5" placeholder="e.g., The process of photosynthesis"></textarea>
            <div id="prompt-error" class="field-error"></div>
          </div>
          <div class="row">
            <label for="photo">Image to explain (optional)</label>
            <input id="photo" type="file" accept="image/*" />
            <button type="button" id="remove-photo" hidden>Remove image</button>
          </div>
          <div class="row">
            <label for="domain">Domain</label>
            <select id="domain"></select>
          </div>
          <button type="submit" id="submit">Generate Visual</button>
        </form>
      </section>
      <section class="card">
        <h2 id="result-title">Generated Visual</h2>
        <div id="result"><p class="muted">Your generated visual will be displayed here.</p></div>
      </section>
    </main>
    <script>
      const MARKER = '\\u274c';
      let photoDataUri = null;
      const el = (id) => document.getElementById(id);

      function setPhoto(uri) {
        photoDataUri = uri;
        el('prompt').disabled = uri !== null;
        el('remove-photo').hidden = uri === null;
        el('submit').textContent = uri ? 'Explain Image' : 'Generate Visual';
        if (uri === null) { el('photo').value = ''; }
      }

      function renderResult(content) {
        const box = el('result');
        box.innerHTML = '';
        if (!content) {
          box.innerHTML = '<p class="muted">Your generated visual will be displayed here.</p>';
          return;
        }
        if (content.startsWith(MARKER)) {
          const p = document.createElement('p');
          p.className = 'error';
          p.textContent = content;
          box.appendChild(p);
        } else if (content.startsWith('data:image/')) {
          const img = document.createElement('img');
          img.src = content;
          img.alt = el('prompt').value;
          box.appendChild(img);
        } else {
          const p = document.createElement('p');
          p.textContent = content;
          box.appendChild(p);
        }
      }

      function applyState(state) {
        el('prompt').value = state.prompt;
        el('domain').value = state.domain;
        setPhoto(state.photoDataUri);
        renderResult(state.generatedContent);
      }

      async function loadHistory() {
        const res = await fetch('/api/history');
        const data = await res.json();
        const list = el('history');
        list.innerHTML = '';
        if (data.entries.length === 0) {
          list.innerHTML = '<p class="muted">No visuals generated yet.</p>';
          return;
        }
        data.entries.forEach((entry, position) => {
          const button = document.createElement('button');
          button.className = 'history-item';
          const title = document.createElement('div');
          if (entry.kind === 'visual') {
            const img = document.createElement('img');
            img.src = entry.image;
            img.alt = entry.prompt;
            button.appendChild(img);
            title.textContent = entry.prompt;
          } else {
            const img = document.createElement('img');
            img.src = entry.photoDataUri;
            img.alt = 'Explained image';
            button.appendChild(img);
            title.textContent = entry.explanation.slice(0, 60);
          }
          const domain = document.createElement('div');
          domain.className = 'muted';
          domain.textContent = entry.domain;
          button.append(title, domain);
          button.addEventListener('click', async () => {
            const res = await fetch('/api/history/' + position + '/select', { method: 'POST' });
            if (res.ok) { applyState(await res.json()); window.scrollTo({ top: 0, behavior: 'smooth' }); }
          });
          list.appendChild(button);
        });
      }

      async function loadDomains() {
        const res = await fetch('/api/domains');
        const data = await res.json();
        for (const option of data.domains) {
          const opt = document.createElement('option');
          opt.value = option.value;
          opt.textContent = option.label;
          el('domain').appendChild(opt);
        }
      }

      el('photo').addEventListener('change', (event) => {
        const file = event.target.files[0];
        if (!file) { setPhoto(null); return; }
        const reader = new FileReader();
        reader.onload = () => setPhoto(reader.result);
        reader.readAsDataURL(file);
      });
      el('remove-photo').addEventListener('click', () => setPhoto(null));

      el('form').addEventListener('submit', async (event) => {
        event.preventDefault();
        el('prompt-error').textContent = '';
        const prompt = el('prompt').value;
        if (!photoDataUri && prompt.length < 3) {
          el('prompt-error').textContent = 'Prompt must be at least 3 characters.';
          return;
        }
        el('submit').disabled = true;
        el('result').innerHTML = '<p class="muted">Generating...</p>';
        try {
          const res = await fetch('/api/submit', {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ prompt, domain: el('domain').value, photoDataUri }),
          });
          if (res.status === 422) {
            const data = await res.json();
            const err = data.detail.find((d) => d.loc.includes('prompt'));
            el('prompt-error').textContent = err ? err.msg : 'Invalid input.';
            renderResult(null);
            return;
          }
          if (!res.ok) { renderResult(MARKER + ' An unexpected error occurred.'); return; }
          const outcome = await res.json();
          renderResult(outcome.content);
          if (outcome.recorded) { await loadHistory(); }
        } catch (err) {
          console.error(err);
          renderResult(MARKER + ' An unexpected error occurred.');
        } finally {
          el('submit').disabled = false;
        }
      });

      loadDomains().then(loadHistory);
    </script>
  </body>
</html>
"""
