#!/usr/bin/env python3
"""
Main entry point for the interview coach.
Allows running the package with: python -m interview_coach
"""
import sys
import json
import time

from .config import get_config, DEFAULT_JOB_ROLE
from .errors import DeviceAccessError, InvalidTransitionError, ReportGenerationError
from .interview.events import EventType
from .interview.models import SessionStatus
from .interview.orchestrator import InterviewSession
from .interview.report import ReportService
from .utils import setup_logging

USAGE = """Usage: python -m interview_coach [--role "Job Role"] [--text] [--no-tts] [--no-video] [--resume path.json]

  --role      Target role for the interview (default: Software Developer)
  --text      Type answers instead of speaking them
  --no-tts    Print questions instead of speaking them
  --no-video  Do not stream webcam snapshots
  --resume    JSON file with resume data used to tailor questions

During the interview type /skip to skip a question and /end to finish early."""


def _option_value(args, i, name):
    """Value for `--name value` or `--name=value`; returns (value, next_index)."""
    arg = args[i]
    if arg.startswith(f"--{name}="):
        return arg.split("=", 1)[1], i + 1
    if i + 1 >= len(args):
        print(f"❌ Missing value for --{name}")
        sys.exit(1)
    return args[i + 1], i + 2


def parse_args(argv):
    options = {"role": DEFAULT_JOB_ROLE, "text": False, "tts": None, "video": None, "resume": None}
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("-h", "--help"):
            print(USAGE)
            sys.exit(0)
        elif arg.startswith("--role"):
            options["role"], i = _option_value(argv, i, "role")
            continue
        elif arg.startswith("--resume"):
            options["resume"], i = _option_value(argv, i, "resume")
            continue
        elif arg == "--text":
            options["text"] = True
        elif arg in ("--no-tts", "--quiet"):
            options["tts"] = False
        elif arg == "--tts":
            options["tts"] = True
        elif arg == "--no-video":
            options["video"] = False
        else:
            print(f"❌ Unknown option: {arg}")
            print(USAGE)
            sys.exit(1)
        i += 1
    return options


def load_resume(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        print(f"❌ Could not read resume file {path}: {e}")
        sys.exit(1)
    if not isinstance(data, dict):
        print("❌ Resume file must contain a JSON object")
        sys.exit(1)
    return data


def wait_for_question(session, poll: float = 0.1):
    """Block until a question is active or the session ends."""
    while session.status is SessionStatus.IN_PROGRESS and session.current_question is None:
        time.sleep(poll)
    return session.current_question


def ask_for_answer(session, text_mode):
    """Run one question. Returns False once the user asked to end."""
    if text_mode:
        answer = input("✍️  Your answer (/skip, /end): ").strip()
    else:
        answer = input("🎙️  Press Enter to start recording (/skip, /end): ").strip()

    if answer == "/end":
        return False
    if answer == "/skip":
        session.skip()
        return True

    try:
        session.begin_recording()
    except DeviceAccessError as e:
        print(f"❌ Microphone unavailable: {e}")
        print("   Type /skip to skip this question or /end to finish.")
        return True

    if text_mode:
        session.end_recording(transcript=answer)
    else:
        input("   🔴 Recording... press Enter when you are done. ")
        print("🔍 Evaluating answer...")
        session.end_recording()
    return True


def print_report(report):
    print("\n" + "=" * 50)
    print("📋 INTERVIEW REPORT")
    print("=" * 50)
    print(f"🔢 Overall Score: {report.overall_score:.0f}/100")
    print(f"🎯 Placement Likelihood: {report.placement_likelihood}")
    if report.performance_summary:
        print(f"📝 {report.performance_summary}")
    for title, items in (("💪 Strengths", report.strengths),
                         ("📈 Development Areas", report.development_areas),
                         ("💡 Recommendations", report.recommendations)):
        if items:
            print(title)
            for item in items:
                print(f"   • {item}")


def main():
    """Command-line interface for an interview session."""

    # Load configuration from environment
    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        sys.exit(1)

    options = parse_args(sys.argv[1:])
    if options["tts"] is not None:
        config.enable_tts = options["tts"]
    if options["video"] is not None:
        config.enable_video = options["video"]
    resume_data = load_resume(options["resume"]) if options["resume"] else None

    setup_logging(config.log_file, config.log_level)

    session = InterviewSession.from_config(
        config,
        job_role=options["role"],
        text_mode=options["text"],
        resume_data=resume_data,
    )
    session.event_bus.subscribe(
        EventType.ANSWER_SCORED,
        lambda event: print(f"✅ Score: {event.data['score']:.0f}/100 "
                            f"(running total {event.data['total_score']:.1f})")
    )
    session.event_bus.subscribe(
        EventType.QUESTION_SKIPPED,
        lambda event: print(f"⏭️  Skipped (penalty {event.data['penalty']:.0f})")
    )

    print(f"\n🎙️  Starting interview for {session.job_role} - {session.max_questions} questions")
    print(f"📝 Detailed logs: {config.log_file}")
    print("=" * 50)

    try:
        session.start()
        while wait_for_question(session) is not None:
            try:
                if not ask_for_answer(session, options["text"]):
                    break
            except InvalidTransitionError as e:
                print(f"⚠️  {e}")
        summary = session.end()
    except KeyboardInterrupt:
        print("\n👋 Interview interrupted")
        session.close()
        sys.exit(130)
    except OSError as e:
        print(f"❌ Could not save interview data: {e}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("🎯 INTERVIEW COMPLETE")
    print("=" * 50)
    print(f"📊 Total Score: {summary.score.total_score:.1f}")
    print(f"✅ Answered: {summary.score.questions_answered}   ⏭️  Skipped: {summary.score.questions_skipped}")
    print(f"📈 Session metrics: {session.get_metrics()}")

    reports = ReportService(session.ai_client, session.store)
    while True:
        print("\n⏳ Generating your interview report...")
        try:
            print_report(reports.generate(session.session_id))
            break
        except ReportGenerationError as e:
            print(f"❌ Failed to generate interview evaluation: {e}")
            if input("🔁 Try again? [y/N] ").strip().lower() != "y":
                break
    session.ai_client.close()

    print(f"📁 Full details logged to: {config.log_file}")


if __name__ == "__main__":
    main()
