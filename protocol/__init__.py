"""Protocol - Sum-check prover, verifier, challenge sources and driver."""

from protocol.challenges import (
    ChallengeSource,
    FiatShamirChallenger,
    RandomChallenger,
    ReplayChallenger,
    challenger_from_snapshot,
)
from protocol.proof import (
    RoundMessage,
    SumcheckProof,
    SumcheckTranscript,
    dumps_proof,
    loads_proof,
    proof_from_json,
    proof_to_json,
    transcript_from_json,
    transcript_to_json,
)
from protocol.prover import ProverState, SumcheckProver, prove
from protocol.verifier import (
    Rejection,
    RejectionKind,
    SumcheckVerifier,
    VerificationResult,
    VerifierState,
    replay,
    verify,
)
from protocol.sumcheck import (
    Sumcheck,
    SumcheckConfig,
    run_sumcheck,
    run_sumcheck_with_prover,
)

__all__ = [
    # Challenges
    "ChallengeSource",
    "RandomChallenger",
    "FiatShamirChallenger",
    "ReplayChallenger",
    "challenger_from_snapshot",
    # Messages and proofs
    "RoundMessage",
    "SumcheckTranscript",
    "SumcheckProof",
    "proof_to_json",
    "proof_from_json",
    "transcript_to_json",
    "transcript_from_json",
    "dumps_proof",
    "loads_proof",
    # Prover
    "ProverState",
    "SumcheckProver",
    "prove",
    # Verifier
    "VerifierState",
    "RejectionKind",
    "Rejection",
    "VerificationResult",
    "SumcheckVerifier",
    "verify",
    "replay",
    # Driver
    "SumcheckConfig",
    "Sumcheck",
    "run_sumcheck",
    "run_sumcheck_with_prover",
]
