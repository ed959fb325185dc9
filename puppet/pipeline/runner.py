"""Animation runner shared by the CLI and the management command."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import cv2

from puppet.application.services.puppet_session import PuppetSession
from puppet.mediastream.media_stream import MediaStream
from puppet.retargeting.config import EngineConfig
from puppet.rig.skeleton import Skeleton
from puppet.visualizedata.debug_overlay import render_debug_frame

OUTPUT_ROOT = Path("data/output")


def add_animate_arguments(parser: argparse.ArgumentParser) -> None:
    """Register animation CLI arguments on the provided parser."""
    parser.add_argument("--video", required=True, help="Input video file")
    parser.add_argument("--avatar", required=True, help="Rigged SVG illustration")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="JSON lines file for per-frame transforms (default data/output/<video>.jsonl)",
    )

    parser.add_argument(
        "--min-part-confidence",
        type=float,
        default=None,
        help="Hold joints scoring below this (default from settings, 0.1)",
    )
    parser.add_argument(
        "--min-pose-confidence",
        type=float,
        default=None,
        help="Hold the whole body when the mean joint score is below this (default 0.15)",
    )
    parser.add_argument(
        "--smoothing",
        type=float,
        default=None,
        help="Exponential smoothing factor in (0, 1], 1 disables smoothing (default 0.6)",
    )
    parser.add_argument(
        "--no-mirror",
        action="store_true",
        help="Keep the camera's orientation instead of mirroring the subject",
    )

    parser.add_argument(
        "--model-complexity",
        type=int,
        choices=[0, 1, 2],
        default=1,
        help="MediaPipe Holistic model complexity (default 1)",
    )
    parser.add_argument(
        "--debug-video",
        type=str,
        default=None,
        help="Write an annotated preview video with detected keypoints",
    )
    parser.add_argument(
        "--max-frames",
        type=int,
        default=0,
        help="Stop after this many frames (0 = whole video)",
    )


def build_config(args: argparse.Namespace) -> EngineConfig:
    """Settings-based config with command-line overrides applied."""
    config = EngineConfig.from_settings()
    changes = {}
    if args.min_part_confidence is not None:
        changes["min_part_confidence"] = args.min_part_confidence
    if args.min_pose_confidence is not None:
        changes["min_pose_confidence"] = args.min_pose_confidence
    if args.smoothing is not None:
        changes["smoothing_factor"] = args.smoothing
    if args.no_mirror:
        changes["mirror"] = False
    return config.replace(**changes) if changes else config


def run_animation(args: argparse.Namespace) -> Path:
    """Animate ``args.avatar`` from ``args.video``; returns the output path."""
    from puppet.posedetector.holistic_detector import HolisticDetector

    video_path = Path(args.video)
    output_path = Path(args.output) if args.output else OUTPUT_ROOT / f"{video_path.stem}.jsonl"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config = build_config(args)
    skeleton = Skeleton.from_svg(Path(args.avatar))
    print(f"[animate] avatar {args.avatar}: {len(skeleton)} bones, roles {sorted(skeleton.roles)}")

    stream = MediaStream(video_path)
    writer: Optional[cv2.VideoWriter] = None
    session: Optional[PuppetSession] = None
    names = {bone.bone_id: bone.name for bone in skeleton.bones if bone.role is not None}
    processed = 0
    updated = 0

    with HolisticDetector(model_complexity=args.model_complexity) as detector, output_path.open(
        "w", encoding="utf-8"
    ) as handle:
        for timestamp_ms, rgb in stream.frames():
            if session is None:
                session = PuppetSession(skeleton, stream.width, stream.height, config)
                print(f"[animate] video {stream.width}x{stream.height} @ {stream.fps:.1f} fps")

            result = detector.detect(rgb, timestamp_ms)
            transforms = session.on_detection(result)
            processed += 1
            if result.has_subject:
                updated += 1

            record = transforms.to_dict()
            record["timestamp_ms"] = timestamp_ms
            record["updated"] = result.has_subject
            handle.write(json.dumps(record) + "\n")

            if args.debug_video:
                if writer is None:
                    debug_path = Path(args.debug_video)
                    debug_path.parent.mkdir(parents=True, exist_ok=True)
                    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
                    writer = cv2.VideoWriter(
                        str(debug_path), fourcc, stream.fps, (stream.width, stream.height)
                    )
                annotated = render_debug_frame(
                    rgb,
                    session.last_frame,
                    transforms,
                    config.min_part_confidence,
                    mirrored=config.mirror,
                    names=names,
                )
                writer.write(cv2.cvtColor(annotated, cv2.COLOR_RGB2BGR))

            if args.max_frames and processed >= args.max_frames:
                break

    if writer is not None:
        writer.release()
        print(f"[animate] debug video saved to {args.debug_video}")

    print(f"[animate] {processed} frames ({updated} with a subject) -> {output_path}")
    return output_path


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Drive a rigged SVG puppet from a video.")
    add_animate_arguments(parser)
    args = parser.parse_args(argv)
    try:
        run_animation(args)
    except Exception as exc:
        print(f"[animate] error: {exc}", file=sys.stderr)
        sys.exit(1)
