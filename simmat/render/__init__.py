"""Rendering of similarity grids to labelled GIF images."""
