"""pygame front end: renderer, keyboard controls and the play loop."""
