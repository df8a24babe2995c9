'''Newtonian N-body physics model for the orrery package
Alternate strategy to KeplerianModel backed by a heyoka Taylor integrator'''

import logging
import numpy as np
import heyoka as hy
from .kepler import advance_rotation, reset_to_epoch_offset

logger = logging.getLogger(__name__)

# Newtonian constant of gravitation [km³ kg⁻¹ s⁻²]
G_KM = 6.6743e-20


class NBodyModel:
    """
    Mutual-gravity propagation of every body with a compiled integrator.

    The heyoka system is built and compiled once per distinct set of
    bodies (names and masses) and reused on every later step. Each step
    loads the current body states, integrates for the scaled time step,
    re-centres the result on the central body and writes positions and
    velocities back. Axial rotation advances as in the Keplerian model.

    Relativistic precession is not modelled; the flag is accepted for
    interface compatibility and ignored.

    Parameters
    ----------
    compact_mode : bool, optional
        Passed to heyoka.taylor_adaptive. Compact mode compiles much faster
        for large systems. Default: True
    """
    name = 'nbody'

    def __init__(self, compact_mode: bool = True):
        self._compact_mode = compact_mode
        self._integrator = None
        self._key = None

    # ========== COMPILATION ==========
    @staticmethod
    def _system_key(bodies) -> tuple:
        return tuple((b.name, float(b.mass)) for b in bodies)

    def _compile_integrator(self, bodies):
        """
        Build and compile the N-body equations for this body set.

        This performs automatic differentiation and LLVM compilation,
        which can take a few seconds.
        """
        key = self._system_key(bodies)
        if self._integrator is not None and key == self._key:
            return  # Already compiled

        logger.info("Compiling %d-body integrator (%s)",
                    len(bodies), ", ".join(name for name, _ in key))
        sys = hy.model.nbody(len(bodies), masses=[b.mass for b in bodies],
                             Gconst=G_KM)
        self._integrator = hy.taylor_adaptive(
            sys=sys,
            state=[0.0] * (6 * len(bodies)),
            compact_mode=self._compact_mode,
        )
        self._key = key
        logger.info("Compilation complete")

    @property
    def is_compiled(self) -> bool:
        return self._integrator is not None

    # ========== PROPAGATION ==========
    def step(self, bodies, elapsed_seconds: float, relativistic: bool = False):
        """
        Advance every body by elapsed_seconds under mutual gravity.

        Raises
        ------
        ValueError
            If the body states or the integrated states are not finite.
            Body positions are left untouched in that case.
        """
        bodies = list(bodies)
        if not bodies or elapsed_seconds == 0:
            return
        self._compile_integrator(bodies)
        ta = self._integrator

        state = np.concatenate([np.concatenate([b.position, b.velocity])
                                for b in bodies])
        if not np.all(np.isfinite(state)):
            raise ValueError(f"Initial N-body state contains NaN or Inf values: {state}")

        ta.time = 0.0
        ta.state[:] = state
        ta.propagate_for(float(elapsed_seconds))

        # Check for integration failure
        result = np.array(ta.state).reshape(len(bodies), 6)
        if not np.all(np.isfinite(result)):
            raise ValueError(
                f"Integration failed: state became invalid during propagation.\n"
                f"Time step: {elapsed_seconds} s\n"
                f"Likely causes:\n"
                f"  - Two bodies passed through each other\n"
                f"  - Time step far too large for the system"
            )

        # keep the central body at the origin
        origin = np.zeros(6)
        for i, body in enumerate(bodies):
            if body.is_central:
                origin = result[i].copy()
                break
        result -= origin

        for body, row in zip(bodies, result):
            body.position = row[:3].copy()
            body.velocity = row[3:].copy()
            advance_rotation(body, elapsed_seconds)
            body.last_update += elapsed_seconds

    def reset(self, bodies, seconds_since_epoch: float, relativistic: bool = False):
        """
        Place every body at an absolute time since J2000.

        Absolute positions come from the Keplerian elements; mutual
        perturbations accumulate again from there.
        """
        for body in bodies:
            reset_to_epoch_offset(body, seconds_since_epoch, relativistic=False)

    def __repr__(self):
        state = "compiled" if self.is_compiled else "not compiled"
        return f"NBodyModel({state})"
