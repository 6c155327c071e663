"""Graph models for module trees and crate layouts."""
