"""
Command-line tuner.

Usage:
    guitar-tuner                      # default microphone
    guitar-tuner --device 3
    guitar-tuner --wav pluck.wav --loop
    guitar-tuner --list-devices
    guitar-tuner --gui
"""

import argparse
import logging
import sys

from .config import TunerConfig, load_config
from .errors import AudioSourceError, ConfigError
from .logging_config import setup_logging
from .sinks import ConsoleSink
from .sources import SoundDeviceSource, WavFileSource, list_input_devices
from .tuner import GuitarTuner

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="guitar-tuner",
        description="Detect the plucked guitar string and show how far it is from pitch.",
    )
    parser.add_argument("--config", help="JSON configuration file")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--device", type=int, help="Audio input device ID")
    source.add_argument("--wav", help="Analyze a WAV file instead of live input")
    parser.add_argument("--loop", action="store_true", help="Repeat the WAV file")
    parser.add_argument("--frames", type=int, help="Stop after this many frames")
    parser.add_argument("--sample-rate", type=int, help="Override the sample rate (Hz)")
    parser.add_argument("--frame-length", type=int, help="Override the frame length (samples)")
    parser.add_argument(
        "--list-devices", action="store_true", help="List audio input devices and exit"
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default WARNING)")
    parser.add_argument("--gui", action="store_true", help="Open the graphical tuner")
    return parser


def build_config(args: argparse.Namespace) -> TunerConfig:
    """Defaults, then the config file, then command-line overrides."""
    config = load_config(args.config) if args.config else TunerConfig()
    overrides = {}
    if args.sample_rate is not None:
        overrides["sample_rate"] = args.sample_rate
    if args.frame_length is not None:
        overrides["frame_length"] = args.frame_length
    return config.replace(**overrides) if overrides else config


def main(argv: list[str] | None = None) -> int:
    """Entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    if args.gui and args.frames is not None:
        parser.error("--frames cannot be used with --gui")

    if args.list_devices:
        for index, name in list_input_devices():
            print(f"{index}: {name}")
        return 0

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        if args.wav:
            source = WavFileSource(
                args.wav,
                frame_length=config.frame_length,
                expected_rate=config.sample_rate,
                loop=args.loop,
                full_scale=config.full_scale,
            )
        else:
            source = SoundDeviceSource(
                device=args.device,
                sample_rate=config.sample_rate,
                frame_length=config.frame_length,
            )
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except AudioSourceError as e:
        print(f"Audio error: {e}", file=sys.stderr)
        return 1

    if args.gui:
        from .gui.tuner_window import main as gui_main

        return gui_main(config, source)

    tuner = GuitarTuner(config)
    print("Tuner started (Ctrl+C to stop)")
    try:
        with source:
            tuner.run(source, ConsoleSink(), max_frames=args.frames)
    except KeyboardInterrupt:
        print("\nStopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
