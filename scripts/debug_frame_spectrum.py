"""
Debug script: Visualize what the coarse and fine scans see at each frame.

For each analyzed frame of a WAV file, plots the normalized coarse-grid
magnitudes (with the peak threshold) and the raw fine-scan magnitudes around
the coarse estimate, annotated with the matched note.

Usage:
    python scripts/debug_frame_spectrum.py pluck.wav [output_prefix] [num_frames]
"""

import sys

import matplotlib

matplotlib.use('Agg')
import matplotlib.pyplot as plt

from guitar_tuner.config import TunerConfig
from guitar_tuner.errors import EndOfStream
from guitar_tuner.matcher import NoteMatcher
from guitar_tuner.preprocessor import Preprocessor
from guitar_tuner.scanner import CoarseScanner, FineScanner
from guitar_tuner.sources import WavFileSource


def plot_frame_spectrum(wav_path, output_prefix, num_frames=10):
    """Plot coarse and fine scan magnitudes for the first non-silent frames."""
    source = WavFileSource(wav_path)
    config = TunerConfig(sample_rate=source.sample_rate)

    preprocessor = Preprocessor(config.frame_length, config.pre_emphasis, config.min_rms)
    coarse = CoarseScanner(
        config.sample_rate,
        config.coarse_min_hz,
        config.coarse_max_hz,
        config.coarse_step_hz,
        config.peak_threshold,
    )
    fine = FineScanner(config.sample_rate, config.fine_range_hz, config.fine_step_hz)
    matcher = NoteMatcher(config.notes, config.match_threshold_cents)

    frame_num = 0
    plotted = 0
    while plotted < num_frames:
        try:
            samples = source.read()
        except EndOfStream:
            break
        frame_num += 1

        frame, rms = preprocessor.process(samples)
        if frame is None:
            continue

        coarse_spectrum = coarse.spectrum(frame.samples)
        f0 = coarse.scan(frame.samples)

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8))

        # Top: coarse grid
        ax1.plot(
            [s.frequency for s in coarse_spectrum],
            [s.magnitude for s in coarse_spectrum],
            'b.-', linewidth=0.8,
        )
        ax1.axhline(config.peak_threshold, color='gray', linestyle=':', label='Peak threshold')
        for note in config.notes:
            ax1.axvline(note.frequency, color='green', linestyle='--', alpha=0.4)
        if f0 is not None:
            ax1.axvline(f0, color='red', linewidth=1.5, label=f'Coarse: {f0:.0f} Hz')
        ax1.set_title(f'Frame {frame_num} - RMS {rms:.4f}')
        ax1.set_xlabel('Frequency (Hz)')
        ax1.set_ylabel('Normalized magnitude')
        ax1.legend(loc='upper right')
        ax1.grid(True, alpha=0.3)

        # Bottom: fine window
        if f0 is not None:
            fine_spectrum = fine.spectrum(frame.samples, f0)
            f_fine = fine.scan(frame.samples, f0)
            match = matcher.match(f_fine)
            label = (
                f'{match.note.name} {match.cents:+.1f} cents' if match else 'no match'
            )
            ax2.plot(
                [s.frequency for s in fine_spectrum],
                [s.magnitude for s in fine_spectrum],
                'purple', marker='.', linewidth=0.8,
            )
            ax2.axvline(f_fine, color='red', linewidth=1.5, label=f'Fine: {f_fine:.2f} Hz')
            ax2.set_title(f'Fine scan - {label}')
            ax2.legend(loc='upper right')
        else:
            ax2.set_title('Fine scan - skipped (no coarse peak)')
        ax2.set_xlabel('Frequency (Hz)')
        ax2.set_ylabel('Magnitude')
        ax2.grid(True, alpha=0.3)

        plt.tight_layout()
        filename = f'{output_prefix}_frame_{frame_num:03d}.png'
        plt.savefig(filename, dpi=100)
        plt.close()
        print(f'Saved: {filename}')
        plotted += 1


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    prefix = sys.argv[2] if len(sys.argv) > 2 else 'debug_spectrum'
    count = int(sys.argv[3]) if len(sys.argv) > 3 else 10
    plot_frame_spectrum(sys.argv[1], prefix, count)
    print('Done!')
