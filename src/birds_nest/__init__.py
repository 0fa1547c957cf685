"""BIRDS NEST life-cycle impact assessment reporting for building energy models."""
