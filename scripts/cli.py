"""
CLI to analyze a recorded video with the saved classifier -> JSON.
"""
from __future__ import annotations
import argparse, json, logging
from pathlib import Path
from moodcam.config import Settings
from moodcam.pipeline import analyze_video_moods

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--video", required=True, help="Path to input video")
    p.add_argument("--model", default=None, help="Path to saved classifier (default: MODEL_PATH)")
    p.add_argument("--out", default="output/moods.json", help="Where the mood timeline JSON goes")
    p.add_argument("--quiet", action="store_true", help="Only write the file; skip the stdout dump")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    settings = Settings(MODEL_PATH=args.model) if args.model else Settings()
    report = analyze_video_moods(args.video, settings)

    text = json.dumps(report, indent=2, ensure_ascii=False)
    if not args.quiet:
        print(text)
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    summary = report.get("summary", {})
    print(f"{int(summary.get('ticks', 0))} ticks, mean stress {summary.get('mean_stress', 0.0)} -> {out}")
    return report

if __name__ == "__main__":
    main()
