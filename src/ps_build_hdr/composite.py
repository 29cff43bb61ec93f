from __future__ import annotations

from pathlib import Path


MACRO_NAME = "ps-build-hdr-composite"
OVERLAY_OPACITY = 40
BLEND_MODE = "SOFTLIGHT-MODE"

_MACRO = f"""
(define ({MACRO_NAME} base-file overlay-file out-file)
  (let* ((image (car (gimp-file-load RUN-NONINTERACTIVE base-file base-file)))
         (overlay (car (gimp-file-load-layer RUN-NONINTERACTIVE image overlay-file))))
    (gimp-image-insert-layer image overlay 0 -1)
    (gimp-layer-set-opacity overlay {OVERLAY_OPACITY})
    (gimp-layer-set-mode overlay {BLEND_MODE})
    (let ((flat (car (gimp-image-flatten image))))
      (gimp-file-save RUN-NONINTERACTIVE image flat out-file out-file))
    (gimp-image-delete image)))
""".strip()


def _scheme_string(path: Path) -> str:
    escaped = str(path).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def composite_args(base: Path, overlay: Path, output: Path) -> list[str]:
    """GIMP batch-mode arguments: macro definition, macro call, quit."""
    call = f"({MACRO_NAME} {_scheme_string(base)} {_scheme_string(overlay)} {_scheme_string(output)})"
    return ["-i", "-b", _MACRO, "-b", call, "-b", "(gimp-quit 0)"]
