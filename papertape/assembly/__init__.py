"""Row assembly: banner lettering, leader, code range, trailer."""
