"""Registries - Voter records and the proposal sequence"""
from typing import Dict, Iterator, List

from ..domain.models import Voter, Proposal
from ..domain.errors import ProposalIndexOutOfRangeError


class VoterRegistry:
    """
    One record per identity
    
    Unknown identities read as the default record (nothing set) without
    being stored; records are only created by registration.
    """
    
    def __init__(self):
        self._voters: Dict[str, Voter] = {}
    
    def get(self, identity: str) -> Voter:
        voter = self._voters.get(identity)
        if voter is None:
            return Voter()
        return voter
    
    def is_registered(self, identity: str) -> bool:
        return self.get(identity).is_registered
    
    def register(self, identity: str) -> Voter:
        voter = self._voters.setdefault(identity, Voter())
        voter.is_registered = True
        return voter
    
    def record_vote(self, identity: str, proposal_index: int) -> Voter:
        voter = self._voters[identity]
        voter.has_voted = True
        voter.voted_proposal_id = proposal_index
        return voter
    
    def registered_count(self) -> int:
        return sum(1 for v in self._voters.values() if v.is_registered)
    
    def voted_count(self) -> int:
        return sum(1 for v in self._voters.values() if v.has_voted)
    
    def copy_records(self) -> Dict[str, Voter]:
        return {identity: voter.model_copy() for identity, voter in self._voters.items()}
    
    def __len__(self) -> int:
        return len(self._voters)


class ProposalRegistry:
    """Append-only proposal sequence; indices never change once assigned"""
    
    def __init__(self):
        self._proposals: List[Proposal] = []
    
    def append(self, description: str) -> int:
        """Add a proposal with no votes and return its index"""
        self._proposals.append(Proposal(description=description, vote_count=0))
        return len(self._proposals) - 1
    
    def contains_description(self, description: str) -> bool:
        """Exact-match scan over every registered description"""
        return any(p.description == description for p in self._proposals)
    
    def in_range(self, index: int) -> bool:
        return 0 <= index < len(self._proposals)
    
    def get(self, index: int) -> Proposal:
        if not self.in_range(index):
            raise ProposalIndexOutOfRangeError(
                f"No proposal at index {index}",
                details={"proposal_index": index, "proposal_count": len(self._proposals)}
            )
        return self._proposals[index]
    
    def increment_votes(self, index: int) -> Proposal:
        proposal = self.get(index)
        proposal.vote_count += 1
        return proposal
    
    def winning_index(self) -> int:
        """
        Lowest index holding the strictly highest vote count
        
        Falls back to 0 when the sequence is empty or every count is 0.
        """
        winning_vote_count = 0
        winning_index = 0
        for index, proposal in enumerate(self._proposals):
            if proposal.vote_count > winning_vote_count:
                winning_vote_count = proposal.vote_count
                winning_index = index
        return winning_index
    
    def copy_records(self) -> List[Proposal]:
        return [p.model_copy() for p in self._proposals]
    
    def __iter__(self) -> Iterator[Proposal]:
        return iter(self._proposals)
    
    def __len__(self) -> int:
        return len(self._proposals)
