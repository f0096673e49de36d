"""Tests for the classification database."""

import json

import pytest

from declutter.core.classification import ClassificationError, ClassificationStore
from declutter.core.models import Removal, UadList


class TestClassificationStore:
    """Test loading and looking up classifications."""
    
    def test_lookup(self):
        """Test a known package is found with its tags."""
        store = ClassificationStore.from_mapping({
            "com.facebook.katana": {
                "list": "Misc",
                "description": "Facebook app",
                "dependencies": [],
                "neededBy": ["com.facebook.services"],
                "labels": [],
                "removal": "Recommended",
            }
        })
        
        entry = store.lookup("com.facebook.katana")
        
        assert entry.uad_list == UadList.MISC
        assert entry.removal == Removal.RECOMMENDED
        assert entry.description == "Facebook app"
        assert entry.needed_by == ["com.facebook.services"]
        assert store.lookup("com.unknown") is None
    
    def test_invalid_tags_skipped(self):
        """Test entries with unknown tags are dropped."""
        store = ClassificationStore.from_mapping({
            "good": {"list": "Oem", "removal": "Expert"},
            "bad": {"list": "Nonsense", "removal": "Expert"},
        })
        
        assert "good" in store
        assert "bad" not in store
        assert len(store) == 1
    
    def test_load_file(self, tmp_path):
        """Test loading a JSON lists file."""
        path = tmp_path / "uad_lists.json"
        path.write_text(json.dumps({
            "com.android.chrome": {"list": "Google", "description": "Chrome", "removal": "Advanced"},
        }), encoding="utf-8")
        
        store = ClassificationStore.load(path)
        
        assert store.lookup("com.android.chrome").uad_list == UadList.GOOGLE
        assert store.source == path
        assert store.last_modified() is not None
    
    def test_load_missing_file(self, tmp_path):
        """Test a missing lists file raises."""
        with pytest.raises(ClassificationError):
            ClassificationStore.load(tmp_path / "missing.json")
    
    def test_load_invalid_json(self, tmp_path):
        """Test malformed JSON raises."""
        path = tmp_path / "uad_lists.json"
        path.write_text("{not json", encoding="utf-8")
        
        with pytest.raises(ClassificationError):
            ClassificationStore.load(path)
    
    def test_load_wrong_shape(self, tmp_path):
        """Test a JSON array is rejected."""
        path = tmp_path / "uad_lists.json"
        path.write_text("[]", encoding="utf-8")
        
        with pytest.raises(ClassificationError):
            ClassificationStore.load(path)
    
    def test_empty_store(self):
        """Test an empty store finds nothing and has no age."""
        store = ClassificationStore.empty()
        
        assert len(store) == 0
        assert store.lookup("anything") is None
        assert store.last_modified() is None
