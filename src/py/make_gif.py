"""Generate a GIF animation from a robot_sim JSON trace."""
import argparse
import io
import json
from typing import Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from PIL import Image

# Heading arrows (dx, dy), north points up
HEADING_ARROW = {
    "NORTH": (0, 0.3),
    "EAST": (0.3, 0),
    "SOUTH": (0, -0.3),
    "WEST": (-0.3, 0),
}

ROBOT_COLORS = [
    "#e6194b", "#3cb44b", "#4363d8", "#f58231", "#911eb4",
    "#42d4f4", "#f032e6", "#bfef45", "#fabed4", "#469990",
    "#dcbeff", "#9A6324", "#800000", "#aaffc3", "#808000",
    "#000075",
]


def load_trace(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def sample_frames(step_count: int, max_frames: int) -> List[int]:
    if step_count > max_frames:
        step = max(1, step_count // max_frames)
        indices = list(range(0, step_count, step))
        if indices[-1] != step_count - 1:
            indices.append(step_count - 1)
        return indices
    return list(range(step_count))


def render_frame(
    width: int,
    height: int,
    step: Dict,
    title: str,
    cell_size: float = 0.8,
) -> Image.Image:
    fig, ax = plt.subplots(figsize=(width * cell_size + 1.0, height * cell_size + 1.5))
    ax.set_xlim(-0.5, width - 0.5)
    ax.set_ylim(-0.5, height - 0.5)
    ax.set_aspect("equal")
    ax.set_title(f"{title}  #{step['step']} {step['instruction']}", fontsize=10, fontweight="bold")
    ax.set_xticks(range(width))
    ax.set_yticks(range(height))

    for y in range(height):
        for x in range(width):
            ax.add_patch(plt.Rectangle((x - 0.5, y - 0.5), 1, 1, color="#f5f5f5", ec="#ddd", lw=0.3))

    selected_id = step["selected"] + 1
    for robot in step["robots"]:
        rid = robot["id"]
        px, py = robot["x"], robot["y"]
        color = ROBOT_COLORS[(rid - 1) % len(ROBOT_COLORS)]
        selected = rid == selected_id
        circle = plt.Circle(
            (px, py), 0.35, color=color, ec="black", lw=2.5 if selected else 1.0, zorder=3
        )
        ax.add_patch(circle)
        ax.text(px, py, str(rid), ha="center", va="center", fontsize=8, fontweight="bold", color="white", zorder=4)

        dx, dy = HEADING_ARROW[robot["heading"]]
        ax.annotate(
            "",
            xy=(px + dx, py + dy),
            xytext=(px, py),
            arrowprops=dict(arrowstyle="->", color="white", lw=1.5),
            zorder=5,
        )

    fig.text(0.05, 0.01, f"Robot {selected_id} of {step['active']}", fontsize=8, color="#555555", va="bottom")
    plt.tight_layout()
    fig.subplots_adjust(bottom=0.08)

    buf = io.BytesIO()
    # Fixed canvas so every frame has the same size
    fig.savefig(buf, format="png", dpi=100)
    plt.close(fig)
    buf.seek(0)
    return Image.open(buf).copy()


def make_gif(
    trace_path: str,
    output_path: str,
    max_frames: int = 60,
    frame_duration: int = 300,
    title: str = "",
) -> int:
    trace = load_trace(trace_path)
    width = trace["table"]["width"]
    height = trace["table"]["height"]
    steps = trace.get("steps", [])

    frames = []
    indices = sample_frames(len(steps), max_frames)
    for idx in indices:
        frames.append(render_frame(width, height, steps[idx], title))
        if len(frames) % 10 == 0:
            print(f"  rendered {len(frames)}/{len(indices)} frames")

    if not frames:
        print("No frames to render!")
        return 0

    frames[0].save(
        output_path,
        save_all=True,
        append_images=frames[1:],
        duration=frame_duration,
        loop=0,
    )
    print(f"Saved {len(frames)} frames to {output_path}")
    return len(frames)


def main():
    parser = argparse.ArgumentParser(description="Generate GIF from a robot_sim trace")
    parser.add_argument("--trace", required=True, help="Path to trace JSON (robot_sim --trace)")
    parser.add_argument("--output", required=True, help="Output GIF path")
    parser.add_argument("--max_frames", type=int, default=60, help="Max frames in GIF")
    parser.add_argument("--duration", type=int, default=300, help="Frame duration in ms")
    parser.add_argument("--title", default="", help="Title for the animation")
    args = parser.parse_args()
    make_gif(args.trace, args.output, args.max_frames, args.duration, args.title)


if __name__ == "__main__":
    main()
