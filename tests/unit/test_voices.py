"""Unit tests for voice selection."""

import pytest

from speechcoach.playback import GTTS_VOICES, GTTSSynthesizer, Voice, select_best_voice


@pytest.mark.unit
class TestSelectBestVoice:

    def test_empty_list(self):
        assert select_best_voice([]) is None

    def test_non_english_falls_back_to_first_voice(self):
        voices = [Voice("Anna", "de-DE"), Voice("Amelie", "fr-CA")]
        assert select_best_voice(voices) == voices[0]

    def test_enhanced_voice_beats_google(self):
        voices = [Voice("Google US English", "en-US"), Voice("Serena (Enhanced)", "en-GB")]
        assert select_best_voice(voices).name == "Serena (Enhanced)"

    def test_non_english_premium_voice_is_ignored(self):
        voices = [Voice("Anna (Premium)", "de-DE"), Voice("Google UK English Male", "en-GB")]
        assert select_best_voice(voices).name == "Google UK English Male"

    def test_british_male_before_british_female(self):
        voices = [Voice("Kate", "en-GB"), Voice("Daniel", "en-GB"), Voice("Alex", "en-US")]
        assert select_best_voice(voices).name == "Daniel"

    def test_any_british_before_us(self):
        voices = [Voice("David", "en-US"), Voice("Oliver", "en-GB")]
        assert select_best_voice(voices).name == "Oliver"

    def test_us_female(self):
        voices = [Voice("Zira", "en-US"), Voice("Karen", "en-AU")]
        assert select_best_voice(voices).name == "Zira"

    def test_other_english_falls_back_to_first_english(self):
        voices = [Voice("Hans", "de-DE"), Voice("Karen", "en-AU"), Voice("Veena", "en-IN")]
        assert select_best_voice(voices).name == "Karen"

    def test_gtts_catalogue_prefers_uk_accent(self):
        voice = select_best_voice(GTTS_VOICES)
        assert voice.lang == "en-GB"
        synthesizer = GTTSSynthesizer.for_voice(voice)
        assert synthesizer.lang == "en"
        assert synthesizer.tld == "co.uk"
