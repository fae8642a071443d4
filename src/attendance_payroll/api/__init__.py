from .mock_hr import MockHRStore, seed_demo_data

__all__ = ['MockHRStore', 'seed_demo_data']
