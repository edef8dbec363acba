"""Local web interface for the hourly task board."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from src.dayboard.runtime.service import get_runtime_service

app = FastAPI(title="Dayboard")


class SaveTaskRequest(BaseModel):
    save_id: str
    text: str | None = None


@app.on_event("startup")
def _init_runtime() -> None:
    # No-op when the daemon already started the runtime in this process.
    get_runtime_service().start(source="app")


@app.get("/health")
def health() -> dict:
    return get_runtime_service().health()


@app.get("/api/board")
def board() -> dict:
    return get_runtime_service().board()


@app.post("/api/tasks/save")
def save_task(req: SaveTaskRequest) -> dict:
    return get_runtime_service().save_task(save_id=req.save_id, text=req.text)


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
    html = """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Dayboard</title>
  <style>
    body { margin: 0; font-family: system-ui, -apple-system, "Segoe UI", sans-serif; background: #f5f5f0; color: #222; }
    header { padding: 24px 16px 12px; text-align: center; border-bottom: 1px solid #ddd; background: #fff; }
    header h1 { margin: 0 0 6px; font-size: 2rem; }
    #current-date { color: #555; font-size: 0.95rem; }
    #row-container { max-width: 960px; margin: 16px auto; padding: 0 12px; }
    .row { display: flex; align-items: stretch; min-height: 72px; border-top: 1px dashed #bbb; opacity: 0; transition: opacity 0.4s ease; }
    .row.row-loaded { opacity: 1; }
    .schedule-time { width: 90px; display: flex; align-items: center; justify-content: flex-end; padding-right: 12px; border-right: 1px solid #bbb; }
    .time-label { margin: 0; font-weight: 600; }
    .task-info { flex: 1; display: flex; }
    .task-info textarea { flex: 1; border: none; padding: 10px; resize: none; font: inherit; color: #fff; background: transparent; }
    .save-area { width: 90px; display: flex; }
    .save-btn { flex: 1; border: none; border-radius: 0 12px 12px 0; background: #06aed5; color: #fff; font-weight: 600; cursor: pointer; }
    .save-btn:hover { background: #0790b0; }
    .time-state-before .task-info { background: #d3d3d3; }
    .time-state-before textarea { color: #555; }
    .time-state-before .save-btn { background: #9aa; cursor: not-allowed; }
    .time-state-current .task-info { background: #ff6961; }
    .time-state-after .task-info { background: #77dd77; }
    #status { text-align: center; color: #888; font-size: 0.85rem; min-height: 1.2em; }
  </style>
</head>
<body>
  <header>
    <h1>Work Day Scheduler</h1>
    <div id="current-date"></div>
  </header>
  <div id="status"></div>
  <div id="row-container"></div>
  <script>
    const rowContainerEl = document.getElementById('row-container');
    const currentDateEl = document.getElementById('current-date');
    const statusEl = document.getElementById('status');
    const rowEls = new Map();
    const lastServerText = new Map();
    const STATE_MARKERS = ['time-state-before', 'time-state-current', 'time-state-after'];

    function createRow(row) {
      const rowDiv = document.createElement('div');
      rowDiv.className = 'row';
      rowDiv.id = row.element_id;

      const timeDiv = document.createElement('div');
      timeDiv.className = 'schedule-time';
      const label = document.createElement('p');
      label.className = 'time-label';
      label.textContent = row.label;
      timeDiv.appendChild(label);

      const infoDiv = document.createElement('div');
      infoDiv.className = 'task-info';
      const textarea = document.createElement('textarea');
      textarea.value = row.text || '';
      infoDiv.appendChild(textarea);

      const saveDiv = document.createElement('div');
      saveDiv.className = 'save-area';
      const saveBtn = document.createElement('button');
      saveBtn.className = 'save-btn';
      saveBtn.textContent = 'Save';
      saveBtn.dataset.saveId = row.save_id;
      saveDiv.appendChild(saveBtn);

      rowDiv.appendChild(timeDiv);
      rowDiv.appendChild(infoDiv);
      rowDiv.appendChild(saveDiv);

      rowEls.set(row.save_id, { rowDiv, textarea });
      lastServerText.set(row.save_id, row.text || '');
      return rowDiv;
    }

    function applyRow(row) {
      const els = rowEls.get(row.save_id);
      if (!els) return;
      for (const marker of STATE_MARKERS) {
        els.rowDiv.classList.toggle(marker, row.markers.includes(marker));
      }
      els.textarea.disabled = !!row.disabled;
      const serverText = row.text || '';
      if (serverText !== lastServerText.get(row.save_id)) {
        els.textarea.value = serverText;
        lastServerText.set(row.save_id, serverText);
      }
    }

    async function fetchBoard() {
      const res = await fetch('/api/board', { cache: 'no-store' });
      return res.json();
    }

    async function refreshBoard() {
      try {
        const data = await fetchBoard();
        if (!data || !data.ok) {
          statusEl.textContent = (data && data.error) ? data.error : 'Board unavailable.';
          return;
        }
        statusEl.textContent = '';
        currentDateEl.textContent = data.current_time || '';
        for (const row of data.rows) applyRow(row);
      } catch (_err) {
        statusEl.textContent = 'Board unavailable.';
      }
    }

    async function onSaveButtonClicked(event) {
      const saveId = event.target && event.target.dataset ? event.target.dataset.saveId : null;
      const els = saveId ? rowEls.get(saveId) : null;
      if (!els) return;
      try {
        const res = await fetch('/api/tasks/save', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ save_id: saveId, text: els.textarea.value }),
        });
        const data = await res.json();
        if (data && data.saved) {
          lastServerText.set(saveId, data.text || '');
          statusEl.textContent = 'Saved.';
        } else if (data && data.reason === 'row_locked') {
          statusEl.textContent = 'That hour has already passed.';
        }
      } catch (_err) {
        statusEl.textContent = 'Save failed.';
      }
    }

    async function init() {
      const data = await fetchBoard();
      if (!data || !data.ok) {
        statusEl.textContent = (data && data.error) ? data.error : 'Board unavailable.';
        setTimeout(init, 1000);
        return;
      }
      currentDateEl.textContent = data.current_time || '';
      data.rows.forEach((row, index) => {
        const rowDiv = createRow(row);
        applyRow(row);
        rowContainerEl.appendChild(rowDiv);
        setTimeout(() => rowDiv.classList.add('row-loaded'), 50 * index);
      });
      rowContainerEl.addEventListener('click', onSaveButtonClicked);
      setInterval(refreshBoard, 1000);
    }

    init();
  </script>
</body>
</html>
"""
    return HTMLResponse(content=html, headers={"Cache-Control": "no-store, max-age=0"})
