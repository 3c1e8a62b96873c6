"""Tests for framing, spectral analysis and pitch-class profiling."""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chordscribe.core import AudioSamples, InvalidInputError, ConfigurationError, AnalysisFailure
from chordscribe.analysis import (
    FrameSequencer,
    analysis_window,
    bin_frequencies,
    magnitude_spectrum,
    frequency_to_pitch_class,
    pitch_class_map,
    pitch_class_profile,
)
from chordscribe.analysis.chroma import EXCLUDED_BIN

from generate_test_audio import generate_sine_wave, generate_chord, SR


class TestAudioSamples:
    """Tests for the AudioSamples container."""

    def test_stereo_is_downmixed(self):
        stereo = np.array([[1.0, 0.0, 0.5], [0.0, 0.0, -0.5]])
        audio = AudioSamples(stereo, 8000)
        np.testing.assert_allclose(audio.samples, [0.5, 0.0, 0.0])

    def test_samples_by_channels_layout_is_downmixed(self):
        """soundfile.read returns (n_samples, channels)."""
        mono = generate_sine_wave(440.0, 0.5, SR)
        stereo = np.stack([mono, 0.5 * mono], axis=1)
        audio = AudioSamples(stereo, SR)

        assert len(audio) == len(mono)
        np.testing.assert_allclose(audio.samples, 0.75 * mono, rtol=1e-6)

    def test_samples_are_read_only_copy(self):
        data = np.zeros(10)
        audio = AudioSamples(data, 8000)
        assert not audio.samples.flags.writeable
        data[0] = 1.0
        assert audio.samples[0] == 0.0

    def test_duration(self):
        assert AudioSamples(np.zeros(22050), 22050).duration == 1.0

    def test_rejects_bad_shape(self):
        with pytest.raises(InvalidInputError):
            AudioSamples(np.zeros((2, 2, 2)), 8000)

    def test_rejects_bad_sample_rate(self):
        with pytest.raises(ConfigurationError):
            AudioSamples(np.zeros(10), 0)


class TestFrameSequencer:
    """Tests for frame slicing."""

    def test_offsets_and_count(self):
        audio = AudioSamples(np.arange(10, dtype=float), 10)
        sequencer = FrameSequencer(frame_size=4, hop_size=2)

        frames = list(sequencer.frames(audio))

        assert [f.offset for f in frames] == [0, 2, 4, 6]
        assert [f.index for f in frames] == [0, 1, 2, 3]
        assert sequencer.count(len(audio)) == 4
        np.testing.assert_array_equal(frames[1].samples, [2, 3, 4, 5])

    def test_partial_last_frame_is_dropped(self):
        audio = AudioSamples(np.zeros(11), 10)
        frames = list(FrameSequencer(4, 4).frames(audio))
        assert [f.offset for f in frames] == [0, 4]

    def test_restartable(self):
        audio = AudioSamples(np.zeros(100), 10)
        sequencer = FrameSequencer(10, 5)
        first = [f.offset for f in sequencer.frames(audio)]
        second = [f.offset for f in sequencer.frames(audio)]
        assert first == second
        assert len(first) == sequencer.count(100)

    def test_short_buffer_yields_nothing(self):
        audio = AudioSamples(np.zeros(100), 10)
        sequencer = FrameSequencer(4096, 2048)
        assert list(sequencer.frames(audio)) == []
        with pytest.raises(InvalidInputError):
            sequencer.require_frames(audio)

    def test_empty_buffer(self):
        audio = AudioSamples(np.zeros(0), 10)
        with pytest.raises(InvalidInputError):
            FrameSequencer().require_frames(audio)

    @pytest.mark.parametrize("frame_size,hop_size", [(0, 1), (4, 0), (4, 8), (-1, -1)])
    def test_invalid_configuration(self, frame_size, hop_size):
        with pytest.raises(ConfigurationError):
            FrameSequencer(frame_size, hop_size)


class TestSpectrum:
    """Tests for the windowed magnitude spectrum."""

    def test_output_length(self):
        window = analysis_window(4096)
        spectrum = magnitude_spectrum(np.random.default_rng(0).normal(size=4096), window)
        assert spectrum.shape == (2049,)
        assert np.all(spectrum >= 0)

    def test_hann_window(self):
        window = analysis_window(8)
        assert window[0] == 0.0
        assert window.max() == pytest.approx(1.0)
        assert not window.flags.writeable

    def test_peak_at_sine_frequency(self):
        n_fft = 4096
        frame = generate_sine_wave(440.0, 1.0, SR)[:n_fft]
        spectrum = magnitude_spectrum(frame, analysis_window(n_fft))
        freqs = bin_frequencies(n_fft, SR)
        assert abs(freqs[np.argmax(spectrum)] - 440.0) < SR / n_fft

    def test_length_mismatch_is_analysis_failure(self):
        with pytest.raises(AnalysisFailure):
            magnitude_spectrum(np.zeros(10), analysis_window(8))

    def test_non_finite_input_is_analysis_failure(self):
        frame = np.zeros(8)
        frame[3] = np.nan
        with pytest.raises(AnalysisFailure):
            magnitude_spectrum(frame, analysis_window(8))


class TestPitchClassProfile:
    """Tests for chroma folding."""

    def test_frequency_to_pitch_class(self):
        freqs = np.array([440.0, 261.63, 880.0, 55.0, 329.63, 493.88])
        np.testing.assert_array_equal(
            frequency_to_pitch_class(freqs), [9, 0, 9, 9, 4, 11]
        )

    def test_out_of_range_bins_are_excluded(self):
        freqs = np.array([0.0, 20.0, 440.0, 9000.0])
        classes = pitch_class_map(freqs, min_frequency=40.0, max_frequency=5000.0)
        np.testing.assert_array_equal(classes, [EXCLUDED_BIN, EXCLUDED_BIN, 9, EXCLUDED_BIN])

    def test_normalized_peak_is_one(self):
        classes = np.array([0, 0, 4, 7, EXCLUDED_BIN])
        spectrum = np.array([1.0, 1.0, 1.0, 2.0, 100.0])
        chroma = pitch_class_profile(spectrum, classes)

        assert chroma.shape == (12,)
        assert chroma.max() == 1.0
        assert chroma[7] == 1.0
        assert chroma[0] == pytest.approx(0.5)
        assert chroma[4] == pytest.approx(0.25)

    def test_silence_gives_zero_vector(self):
        classes = np.array([0, 4, 7])
        chroma = pitch_class_profile(np.zeros(3), classes)
        np.testing.assert_array_equal(chroma, np.zeros(12))

    def test_energy_below_noise_floor_gives_zero_vector(self):
        classes = np.array([0, 4, 7])
        chroma = pitch_class_profile(np.full(3, 1e-4), classes, noise_floor=1e-6)
        np.testing.assert_array_equal(chroma, np.zeros(12))

    def test_chord_audio_profile(self):
        """A C major triad concentrates energy in C, E and G."""
        n_fft = 4096
        frame = generate_chord([60, 64, 67], 1.0)[SR // 4:SR // 4 + n_fft]
        spectrum = magnitude_spectrum(frame, analysis_window(n_fft))
        classes = pitch_class_map(bin_frequencies(n_fft, SR))
        chroma = pitch_class_profile(spectrum, classes)

        top_three = set(np.argsort(chroma)[-3:])
        assert top_three == {0, 4, 7}


class TestAudioLoader:
    """Tests for decoding audio files."""

    def test_stereo_file_is_mono_and_normalized(self, tmp_path):
        import soundfile as sf
        from chordscribe.input import AudioLoader

        tone = 0.25 * generate_sine_wave(440.0, 0.5, SR)
        path = tmp_path / "stereo.wav"
        sf.write(str(path), np.stack([tone, tone], axis=1), SR)

        audio = AudioLoader().load(str(path))

        assert audio.sample_rate == SR
        assert audio.samples.ndim == 1
        assert len(audio) == len(tone)
        assert np.max(np.abs(audio.samples)) == pytest.approx(1.0)

    def test_unsupported_format(self, tmp_path):
        from chordscribe.input import AudioLoader

        path = tmp_path / "notes.txt"
        path.write_text("not audio")
        with pytest.raises(ValueError):
            AudioLoader().load(str(path))

    def test_missing_file(self, tmp_path):
        from chordscribe.input import AudioLoader

        with pytest.raises(FileNotFoundError):
            AudioLoader().load(str(tmp_path / "missing.wav"))

    def test_runtime_code_does_not_need_soundfile(self):
        """soundfile is only a test dependency; decoding goes through librosa."""
        package_dir = Path(__file__).parent.parent / "chordscribe"
        for source in package_dir.rglob("*.py"):
            text = source.read_text(encoding="utf-8")
            assert "import soundfile" not in text, source
