# pathpaint/app/viewer.py
#!/usr/bin/env python3
"""
Pathpaint Viewer: paint a map, then watch A* explore and resolve it

- Mouse:
    [LEFT]       -> apply current mode to a cell (drag paints walls)
- Keyboard:
    [S]/[E]/[W]  -> mode: start / end / wall
    [G]/[C]      -> mode: weight (asks for a value) / clear cell
    [SPACE]      -> find path / pause / resume
    [N]          -> single step
    [R]          -> reset grid
    [K]/[L]      -> save / load the grid slot
    [+]/[-]      -> faster / slower
    [Q]/[ESC]    -> quit

Settings: PATHPAINT_* env vars or --rows= --cols= --search-delay-ms= ...
"""

# --- bootstrap import path so `from pathpaint...` works when run as a script ---
import sys, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------------

from typing import Tuple, Optional
import pygame

from pathpaint.config import Settings, configure_logging
from pathpaint.core.animator import PathAnimator
from pathpaint.core.errors import PathpaintError
from pathpaint.core.persistence import SlotStore
from pathpaint.core.search import AStarSearch
from pathpaint.core.session import EditSession
from pathpaint.core.types import Cell, CellState, StepResult, ROLE_START, ROLE_END

# ---------- Layout ----------
PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 32
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
FLOOR       = (236,238,241)
WALL        = ( 44, 48, 56)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
VISITED_A   = (255,0,120,90)
PATH_MINT   = (0,255,200)
WEIGHT_TINT = (255,170,60)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)
BG_TOP      = (24, 26, 32)
BG_BOT      = (36, 40, 48)

MIN_DELAY_MS = 5
MAX_DELAY_MS = 1000


def ask_weight(initial: Optional[int]) -> Optional[str]:
    """Prompt for a weight with a small tkinter dialog; None if cancelled."""
    import tkinter as tk
    from tkinter import simpledialog
    root = tk.Tk()
    root.withdraw()
    try:
        return simpledialog.askstring("Cell weight", "Weight (whole number, 1 or more):",
                                      initialvalue=str(initial or 5), parent=root)
    finally:
        root.destroy()


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, settings: Settings, session: Optional[EditSession] = None):
        pygame.init()

        self.settings = settings
        self.session = session or EditSession.from_settings(settings)
        self.store = SlotStore(settings.slot)
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid = self.session.grid
        self.cell_size = self._auto_cell_size()
        win_w = GRID_MARGIN*2 + grid.cols * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.rows * self.cell_size, 620)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Pathpaint")

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        self.search: Optional[AStarSearch] = None
        self.animator: Optional[PathAnimator] = None
        self.phase = "edit"          # edit | search | reveal | done | no_path
        self.running = False
        self.search_delay_ms = settings.search_delay_ms
        self.reveal_delay_ms = settings.reveal_delay_ms
        self.message = ""
        self._last_step_t = 0.0
        self._painting: Optional[bool] = None  # wall state being dragged
        self.clock = pygame.time.Clock()
        self._last_metrics: dict = {}

    @property
    def grid(self):
        return self.session.grid

    # ---------- layout ----------
    def _auto_cell_size(self) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(10, min(CELL_SIZE_DEFAULT, target_h // self.grid.rows))

    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and place the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.grid.cols, avail_h // self.grid.rows)))

        grid_plate_w = self.grid.cols * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.grid.rows * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(0, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        ox, oy = self._grid_origin
        x, y = pos
        if x < ox or y < oy:
            return None
        c = ((y - oy) // self.cell_size, (x - ox) // self.cell_size)
        return c if self.grid.in_bounds(c) else None

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick()
            self._draw()
            self.clock.tick(60)

    def _tick(self):
        now = time.time()
        delay = self.search_delay_ms if self.phase == "search" else self.reveal_delay_ms
        if (now - self._last_step_t) * 1000.0 >= delay:
            self._last_step_t = now
            self._do_step()

    def _do_step(self):
        if self.phase == "edit" and not self._start_search():
            return
        if self.phase == "search":
            self._apply_result(self.search.step())
        elif self.phase == "reveal":
            event = self.animator.step()
            if event is not None:
                event.apply(self.grid)
            if self.animator.is_terminated:
                self.phase = "done"
                self.running = False
                self.message = f"Path cost {self._last_metrics.get('total_cost')}"

    def _apply_result(self, res: StepResult):
        if res.metrics:
            self._last_metrics = res.metrics
        if res.status == "done":
            self.animator = PathAnimator.for_grid(self.grid, res.path or [])
            self.phase = "reveal"
        elif res.status == "no_path":
            self.phase = "no_path"
            self.running = False
            self.message = "No path found."
            print(self.message)

    def _start_search(self) -> bool:
        try:
            self.search = self.session.begin_search()
        except PathpaintError as ex:
            self.message = str(ex)
            print(f"Cannot search: {ex}")
            self.running = False
            return False
        self.animator = None
        self.phase = "search"
        self.message = ""
        return True

    def _end_run(self):
        """Drop search overlays and go back to editing."""
        self.search = None
        self.animator = None
        self.running = False
        self.phase = "edit"
        self._last_metrics = {}
        self.grid.clear_marks()

    # ---------- actions ----------
    def _toggle_run(self):
        if self.phase in ("done", "no_path"):
            self._end_run()
        if self.phase == "edit" and not self._start_search():
            return
        self.running = not self.running
        self._refresh_active_states()

    def _set_mode(self, mode: str):
        if mode == "weight":
            answer = ask_weight(self.session.weight_value)
            if answer is None:
                return
            if not self.session.set_weight_value(answer):
                self.message = f"Invalid weight: {answer!r}"
                return
        self.session.set_mode(mode)
        self.message = ""
        self._refresh_active_states()

    def _reset(self):
        self._end_run()
        self.session.apply("reset")
        self.message = "Grid reset."
        self._refresh_active_states()

    def _save(self):
        try:
            self.session.save(self.store)
            self.message = f"Saved to {self.store.path.name}"
        except OSError as ex:
            self.message = f"Save failed: {ex}"
            print(self.message)

    def _load(self):
        self._end_run()
        try:
            if not self.session.load(self.store):
                self.message = "Nothing saved yet."
                return
        except (PathpaintError, OSError) as ex:
            self.message = f"Load failed: {ex}"
            print(self.message)
            return
        self.message = "Loaded."
        self._layout(*self.screen.get_size())

    def _bump_speed(self, faster: bool):
        factor = 0.5 if faster else 2.0
        self.search_delay_ms = int(max(MIN_DELAY_MS, min(MAX_DELAY_MS, self.search_delay_ms * factor)))
        self.reveal_delay_ms = int(max(MIN_DELAY_MS, min(MAX_DELAY_MS, self.reveal_delay_ms * factor)))

    def _click_cell(self, c: Cell, dragging: bool = False):
        if self.phase != "edit":
            if self.phase in ("done", "no_path"):
                self._end_run()
            else:
                return  # no edits while a search is in flight
        session = self.session
        if session.mode == "wall":
            state = self.grid.cell(c)
            if dragging and state.is_wall == self._painting:
                return
            if session.click(c) and not dragging:
                self._painting = self.grid.cell(c).is_wall
            return
        if not dragging:
            session.click(c)

    # ---------- events ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(480, e.w), max(420, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                handled = False
                for b in self._buttons:
                    handled = b.handle_mouse(e) or handled
                if handled:
                    continue
                if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    c = self._cell_at(e.pos)
                    if c is not None:
                        self._click_cell(c)
                elif e.type == pygame.MOUSEMOTION and e.buttons[0] and self._painting is not None:
                    c = self._cell_at(e.pos)
                    if c is not None:
                        self._click_cell(c, dragging=True)
            elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                self._painting = None

    def _handle_key(self, key):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif key == pygame.K_SPACE:
            self._toggle_run()
        elif key == pygame.K_n:
            if self.phase in ("done", "no_path"):
                self._end_run()
            self.running = False
            self._do_step()
        elif key == pygame.K_r:
            self._reset()
        elif key == pygame.K_k:
            self._save()
        elif key == pygame.K_l:
            self._load()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._bump_speed(True)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self._bump_speed(False)
        elif key == pygame.K_s:
            self._set_mode("start")
        elif key == pygame.K_e:
            self._set_mode("end")
        elif key == pygame.K_w:
            self._set_mode("wall")
        elif key == pygame.K_g:
            self._set_mode("weight")
        elif key == pygame.K_c:
            self._set_mode("clear")
        self._refresh_active_states()

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(BG_TOP[i] + (BG_BOT[i]-BG_TOP[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        overlay = pygame.Surface((cs, cs), pygame.SRCALPHA)
        overlay.fill(VISITED_A)

        for (row, col), state in self.grid.iter_cells():
            rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
            pygame.draw.rect(self.screen, WALL if state.is_wall else FLOOR, rect)
            if state.weight > 1 and not state.is_wall:
                pygame.draw.rect(self.screen, WEIGHT_TINT, rect.inflate(-4, -4), border_radius=3)
                if cs >= 18:
                    txt = self.font_small.render(str(state.weight), True, BLACK)
                    self.screen.blit(txt, txt.get_rect(center=rect.center))
            if state.visited:
                self.screen.blit(overlay, rect.topleft)
            if state.on_path:
                pygame.draw.rect(self.screen, PATH_MINT, rect.inflate(-cs//3, -cs//3), border_radius=4)
            pygame.draw.rect(self.screen, BLACK, rect, 1)
            if state.role in (ROLE_START, ROLE_END):
                self._draw_badge((row, col), state)

    def _draw_badge(self, cell: Cell, state: CellState):
        cs = self.cell_size
        ox, oy = self._grid_origin
        row, col = cell
        cx = ox + col*cs + cs//2
        cy = oy + row*cs + cs//2
        color = BLUE if state.role == ROLE_START else RED
        pygame.draw.circle(self.screen, color, (cx, cy), max(4, cs//2 - 3))
        txt = self.font_small.render("S" if state.role == ROLE_START else "E", True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(cx, cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8
        half = (w - 8) // 2

        def pair(left, right):
            nonlocal y
            (l_label, l_cb, l_attr), (r_label, r_cb, r_attr) = left, right
            lb = UIButton(l_label, pygame.Rect(x, y, half, h), l_cb, togglable=l_attr is not None)
            rb_ = UIButton(r_label, pygame.Rect(x + half + 8, y, half, h), r_cb, togglable=r_attr is not None)
            for btn, attr in ((lb, l_attr), (rb_, r_attr)):
                self._buttons.append(btn)
                if attr:
                    setattr(self, attr, btn)
            y += h + gap

        pair(("Start", lambda: self._set_mode("start"), "btn_mode_start"),
             ("End", lambda: self._set_mode("end"), "btn_mode_end"))
        pair(("Wall", lambda: self._set_mode("wall"), "btn_mode_wall"),
             ("Weight", lambda: self._set_mode("weight"), "btn_mode_weight"))
        pair(("Clear cell", lambda: self._set_mode("clear"), "btn_mode_clear"),
             ("Reset", self._reset, None))
        pair(("Find / Pause", self._toggle_run, "btn_run"),
             ("Step Once", lambda: self._handle_key(pygame.K_n), None))
        pair(("Speed -", lambda: self._bump_speed(False), None),
             ("Speed +", lambda: self._bump_speed(True), None))
        pair(("Save", self._save, None),
             ("Load", self._load, None))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))
        mode = self.session.mode
        for name in ("start", "end", "wall", "weight", "clear"):
            btn = getattr(self, f"btn_mode_{name}", None)
            if btn is not None:
                btn.set_active(mode == name)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 210
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Popped: {m.get('popped', 0)}   Open: {m.get('open_size', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']}")
        line("-" * 26)
        weight = self.session.weight_value
        mode = self.session.mode + (f" ({weight})" if self.session.mode == "weight" else "")
        line(f"Mode: {mode}")
        line(f"State: {self.phase}{'' if self.running or self.phase == 'edit' else ' (paused)'}")
        line(f"Delay: {self.search_delay_ms} ms / step")
        if self.message:
            line(self.message, color=ACCENT_GOLD)

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(settings: Optional[Settings] = None, session: Optional[EditSession] = None):
    settings = settings or Settings.resolve()
    configure_logging(settings.log_level)
    try:
        session = session or EditSession.from_settings(settings)
    except PathpaintError as ex:
        print(f"Failed to create grid: {ex}")
        sys.exit(1)
    Viewer(settings, session).run()

if __name__ == "__main__":
    main()
