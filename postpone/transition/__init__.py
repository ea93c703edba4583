from .transition_coordinator import TransitionCoordinator as TransitionCoordinator
