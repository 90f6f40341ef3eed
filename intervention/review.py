"""
Offline intervention review for a recorded BBS item
===================================================

HOW TO USE:
  python -m intervention.review --video recordings/item12.mp4 --item 11 \
      --score 2 --step-count 3

  1. Download the MediaPipe models into models/ (hand_landmarker.task and
     pose_landmarker_lite.task, or point --config at a file that says where).
  2. Run the script on a recording of one assessment item.
  3. It prints every time intervention is confirmed or cleared, and a
     summary at the end. With --score it also prints the capped score.
  4. Events are appended to the events log (see config events_log_path).

HOW IT WORKS:
  - Reads frames with OpenCV, runs MediaPipe Pose on every frame
  - Feeds frames to an InterventionSession (MediaPipe Hands, LIVE_STREAM)
    and checks intervention against the pose each frame, exactly as the
    live app would
  - Timestamps come from the video's FPS so results are reproducible
"""

import argparse
import logging
import sys

import cv2

from intervention.config import load_config
from intervention.constants import BBS_ITEM_NAMES, CONFIG_PATH
from intervention.hands import MediaPipeHandTracker
from intervention.pose import MediaPipePoseProvider
from intervention.scoring import ScoreResult
from intervention.session import InterventionSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Review a recorded BBS item for therapist intervention.")
    parser.add_argument("--video", help="Path to the recorded item video.", required=True)
    parser.add_argument("--config", help="Path to config JSON.", default=CONFIG_PATH)
    parser.add_argument("--item", help="Zero-based BBS item index.", type=int, default=None)
    parser.add_argument("--score", help="Score given for the item (0-4).", type=int, default=None)
    parser.add_argument("--reason", help="Reason text for the score.", default="")
    parser.add_argument("--step-count", help="Steps completed (item 11).", type=int, default=None)
    parser.add_argument("--hold-duration", help="Seconds held (item 12).", type=float, default=None)
    parser.add_argument("--debug", help="Enable debug logging.", action="store_true", default=False)
    return parser


def review(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    cap = cv2.VideoCapture(args.video)
    if not cap.isOpened():
        logger.error("Could not open video: %s", args.video)
        return 1
    fps = cap.get(cv2.CAP_PROP_FPS) or 30.0

    frames = 0
    confirmed_frames = 0
    was_detected = False
    def tracker_factory():
        return MediaPipeHandTracker(input_bgr=True)

    try:
        with InterventionSession(config, tracker_factory=tracker_factory) as session:
            session.initialize(block=True)
            if not session.available:
                logger.error("Hand tracking unavailable; see log for the cause.")
                return 1
            if args.item is not None:
                session.begin_item(args.item)

            with MediaPipePoseProvider(model_path=config.pose_model_path) as pose:
                while True:
                    ok, frame = cap.read()
                    if not ok:
                        break
                    ts = int(frames * 1000 / fps)
                    frames += 1

                    session.submit_frame(frame, ts)
                    check = session.check_intervention(pose.infer(frame, ts))
                    if check.detected:
                        confirmed_frames += 1
                    if check.detected != was_detected:
                        state = "CONFIRMED" if check.detected else "cleared"
                        print(f"[{ts / 1000:7.2f}s] intervention {state} "
                              f"(hands={check.hand_count}, near body={check.extra_hands_near_body})")
                        was_detected = check.detected

            print(f"Frames: {frames}  confirmed frames: {confirmed_frames}  "
                  f"confirmed during item: {session.confirmed_this_item}")

            if args.item is not None and args.score is not None:
                item_data = {"step_count": args.step_count, "hold_duration": args.hold_duration}
                result = session.score_item(ScoreResult(args.score, args.reason), item_data)
                name = BBS_ITEM_NAMES[args.item] if 0 <= args.item < len(BBS_ITEM_NAMES) else "?"
                print(f"Item {args.item} ({name}): score {args.score} -> {result.score}  {result.reason}")
    finally:
        cap.release()
    return 0


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(review(args))


if __name__ == "__main__":
    main()
