"""LearnTrack: personal learning-progress tracker core."""
